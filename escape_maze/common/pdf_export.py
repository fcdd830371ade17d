from typing import List, Dict
from pathlib import Path
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm

STAT_LINES = [
    ('Total', 'total'),
    ('Passed', 'passed'),
    ('Failed', 'failed'),
    ('Crashed', 'crashed'),
    ('Auto-repaired', 'repaired'),
    ('Avg generation (ms)', 'avg_ms'),
    ('Min generation (ms)', 'min_ms'),
    ('Max generation (ms)', 'max_ms'),
]


def export_summary_pdf(output_path: str, title: str, summary: Dict, image_paths: List[str] | None = None):
    p = canvas.Canvas(output_path, pagesize=A4)
    width, height = A4
    p.setFont("Helvetica-Bold", 16)
    p.drawString(2*cm, height-2*cm, title)
    p.setFont("Helvetica", 11)
    y = height - 3*cm
    stats = summary.get('stats') or {}
    for label, key in STAT_LINES:
        if key in stats:
            p.drawString(2*cm, y, f"{label}: {stats[key]}")
            y -= 0.7*cm
    failures = summary.get('failures') or []
    if failures:
        y -= 0.4*cm
        p.drawString(2*cm, y, f"Failing mazes: {len(failures)}")
        y -= 0.7*cm
        for it in failures[:20]:
            p.drawString(2*cm, y, f"[{it.get('index')}] seed={it.get('seed')} errors={','.join(it.get('errors') or [])}")
            y -= 0.6*cm
            if y < 4*cm:
                p.showPage()
                p.setFont("Helvetica", 11)
                y = height - 3*cm
    if image_paths:
        img = image_paths[0]
        if img and Path(img).exists():
            p.showPage()
            p.drawString(2*cm, height-2*cm, "Sample Maze")
            p.drawImage(img, 2*cm, 4*cm, width=16*cm, preserveAspectRatio=True, mask='auto')
    p.save()
