"""
统计模块
单次运行记录、跨运行聚合和报告输出
"""

from .frame_statistics import FrameMatchingStatistics, SingleRunStatistics, StatisticsElement
from .collected_statistics import CollectedStatistics
from .report_writer import write_reports, build_summary, save_summary

__all__ = [
    'FrameMatchingStatistics',
    'SingleRunStatistics',
    'StatisticsElement',
    'CollectedStatistics',
    'write_reports',
    'build_summary',
    'save_summary'
]
