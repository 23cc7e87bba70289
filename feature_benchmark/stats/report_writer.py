"""
统计报告输出
将聚合结果写为制表符分隔的文本文件和YAML摘要
"""

from pathlib import Path
from typing import Dict, Any, Optional, TextIO
import yaml

from .collected_statistics import CollectedStatistics
from .frame_statistics import StatisticsElement

# 报告文件名 -> 统计项
REPORT_FILES = {
    'MatchingRatio.txt': StatisticsElement.MATCHING_RATIO,
    'PercentOfMatches.txt': StatisticsElement.PERCENT_OF_MATCHES,
    'PercentOfCorrectMatches.txt': StatisticsElement.PERCENT_OF_CORRECT_MATCHES,
    'MeanDistance.txt': StatisticsElement.MEAN_DISTANCE,
    'HomographyError.txt': StatisticsElement.HOMOGRAPHY_ERROR,
}

PERFORMANCE_FILE = 'Performance.txt'
MISSING_VALUE = '-'

def format_value(value: Optional[float]) -> str:
    if value is None:
        return MISSING_VALUE
    return f"{value:.6g}"

def print_statistics(stream: TextIO, stats: CollectedStatistics, element: StatisticsElement):
    """每行一个参数值，每列一个算法"""
    series = stats.average_across_images(element)
    algorithm_names = list(series.keys())
    arguments = stats.argument_values()

    stream.write('\t'.join(['Argument'] + algorithm_names) + '\n')
    for index, argument in enumerate(arguments):
        row = [format_value(argument)]
        for name in algorithm_names:
            values = series[name]
            row.append(format_value(values[index] if index < len(values) else None))
        stream.write('\t'.join(row) + '\n')

def print_performance_statistics(stream: TextIO, stats: CollectedStatistics):
    """每行一个算法的平均耗时"""
    performance = stats.average_performance()
    keypoints = stats.average_per_algorithm(StatisticsElement.POINTS_COUNT)
    valid_ratio = stats.valid_run_ratio()

    stream.write('Algorithm\tAverage time (ms)\tAverage keypoints\tValid runs\n')
    for name, value in performance.items():
        stream.write(f"{name}\t{format_value(value)}\t{format_value(keypoints.get(name))}"
                     f"\t{format_value(valid_ratio.get(name))}\n")

def write_reports(stats: CollectedStatistics, output_dir: Path) -> Dict[str, Path]:
    """
    写出六个文本报告

    Args:
        stats: 聚合统计
        output_dir: 输出目录

    Returns:
        paths: 文件名 -> 路径
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {}

    performance_path = output_dir / PERFORMANCE_FILE
    with open(performance_path, 'w', encoding='utf-8') as f:
        print_performance_statistics(f, stats)
    paths[PERFORMANCE_FILE] = performance_path

    for file_name, element in REPORT_FILES.items():
        path = output_dir / file_name
        with open(path, 'w', encoding='utf-8') as f:
            print_statistics(f, stats, element)
        paths[file_name] = path

    return paths

def build_summary(stats: CollectedStatistics) -> Dict[str, Any]:
    """每个算法的标量摘要"""
    summary = {}
    valid_ratio = stats.valid_run_ratio()
    for name in stats.algorithm_names:
        summary[name] = {
            'images': stats.image_ids(name),
            'valid_run_ratio': valid_ratio.get(name),
        }
    for element in StatisticsElement:
        for name, value in stats.average_per_algorithm(element).items():
            summary[name][element.value] = value
    return summary

def save_summary(summary: Dict[str, Any], save_path: Path):
    """保存YAML摘要"""
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    with open(save_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(summary, f, default_flow_style=False, allow_unicode=True, indent=2, sort_keys=False)
