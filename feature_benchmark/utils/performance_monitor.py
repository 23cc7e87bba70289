"""
性能监控器
记录各算法耗时并采集系统资源信息
"""

import psutil
import threading
import numpy as np
from typing import Dict, Any, List, Optional
from collections import defaultdict

def default_num_workers(requested: Optional[int] = None) -> int:
    """线程池大小，未指定时取逻辑核数"""
    if requested is not None and requested > 0:
        return int(requested)
    return max(1, psutil.cpu_count(logical=True) or 1)

class PerformanceMonitor:
    """性能监控器"""

    def __init__(self, memory_limit_gb: float = 8.0):
        """
        初始化性能监控器

        Args:
            memory_limit_gb: 内存告警阈值(GB)
        """
        self.memory_limit_gb = memory_limit_gb

        # 性能统计
        self.timing_stats = defaultdict(list)
        self.memory_stats: List[float] = []

        # 线程安全
        self._lock = threading.Lock()
        self._process = psutil.Process()

    def log_timing(self, key: str, duration_ms: float):
        """记录一次耗时(ms)"""
        with self._lock:
            self.timing_stats[key].append(float(duration_ms))
            self.memory_stats.append(self._process.memory_info().rss / (1024 * 1024))

    def log_timings(self, key: str, durations_ms: List[float]):
        """批量记录耗时"""
        for duration in durations_ms:
            self.log_timing(key, duration)

    def get_timing_summary(self) -> Dict[str, Dict[str, float]]:
        """获取时间统计摘要"""
        with self._lock:
            summary = {}

            for key, times in self.timing_stats.items():
                if len(times) > 0:
                    times_array = np.array(times)
                    summary[key] = {
                        'mean': float(np.mean(times_array)),
                        'std': float(np.std(times_array)),
                        'min': float(np.min(times_array)),
                        'max': float(np.max(times_array)),
                        'median': float(np.median(times_array)),
                        'count': len(times)
                    }

            return summary

    def check_performance_warnings(self) -> List[str]:
        """检查性能警告"""
        warnings = []
        with self._lock:
            peak_mb = max(self.memory_stats) if self.memory_stats else 0.0

        if peak_mb / 1024 > self.memory_limit_gb:
            warnings.append(f"High memory usage: {peak_mb / 1024:.1f}GB")

        return warnings

    def generate_report(self) -> Dict[str, Any]:
        """生成性能报告"""
        report = {
            'timing_analysis': self.get_timing_summary(),
            'warnings': self.check_performance_warnings(),
            'system_info': self.get_system_info()
        }

        with self._lock:
            if self.memory_stats:
                report['memory_history'] = {
                    'mean_mb': float(np.mean(self.memory_stats)),
                    'max_mb': float(np.max(self.memory_stats)),
                    'min_mb': float(np.min(self.memory_stats))
                }

        return report

    @staticmethod
    def get_system_info() -> Dict[str, Any]:
        """获取系统信息"""
        return {
            'cpu_count': psutil.cpu_count(),
            'cpu_count_physical': psutil.cpu_count(logical=False),
            'total_memory_gb': psutil.virtual_memory().total / (1024**3),
            'available_memory_gb': psutil.virtual_memory().available / (1024**3),
        }
