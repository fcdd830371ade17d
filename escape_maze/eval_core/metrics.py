from typing import Dict, List


class StressMetrics:
    def __init__(self, total: int):
        self.total = total

    def _pct(self, n: int) -> float:
        return round(100.0 * n / self.total, 1) if self.total else 0.0

    def score(self, results: List[Dict]) -> Dict:
        # results: one dict per generation with 'ok', 'repaired', 'ms' and optionally 'error'
        crashed = sum(1 for r in results if r.get('error'))
        passed = sum(1 for r in results if r.get('ok'))
        failed = len(results) - passed
        repaired = sum(1 for r in results if r.get('ok') and r.get('repaired'))
        times = [float(r['ms']) for r in results if r.get('ms') is not None]
        return {
            'total': self.total,
            'passed': passed,
            'failed': failed,
            'crashed': crashed,
            'repaired': repaired,
            'passed_pct': self._pct(passed),
            'failed_pct': self._pct(failed),
            'repaired_pct': self._pct(repaired),
            'avg_ms': round(sum(times) / len(times), 2) if times else 0.0,
            'min_ms': round(min(times), 2) if times else 0.0,
            'max_ms': round(max(times), 2) if times else 0.0,
        }
