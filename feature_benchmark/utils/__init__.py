"""
工具模块
包含配置管理、图像转换、性能监控等实用工具
"""

from .data_converter import ImageProcessor
from .config_manager import ConfigManager
from .performance_monitor import PerformanceMonitor, default_num_workers

__all__ = [
    'ImageProcessor',
    'ConfigManager',
    'PerformanceMonitor',
    'default_num_workers'
]
