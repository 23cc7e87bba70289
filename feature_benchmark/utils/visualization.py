"""
评测结果可视化工具
参数曲线绘制和匹配结果绘制
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from ..stats.collected_statistics import CollectedStatistics
from ..stats.frame_statistics import StatisticsElement

PLOT_ELEMENTS = [
    StatisticsElement.MATCHING_RATIO,
    StatisticsElement.PERCENT_OF_MATCHES,
    StatisticsElement.PERCENT_OF_CORRECT_MATCHES,
    StatisticsElement.MEAN_DISTANCE,
    StatisticsElement.HOMOGRAPHY_ERROR,
]

def visualize_matches(source: np.ndarray, source_keypoints: Sequence[cv2.KeyPoint],
                      query: np.ndarray, query_keypoints: Sequence[cv2.KeyPoint],
                      matches: Sequence[cv2.DMatch],
                      save_path: Optional[str] = None) -> np.ndarray:
    """
    绘制正确匹配

    Args:
        source: 源图像（trainIdx）
        source_keypoints: 源图像关键点
        query: 变换/测试图像（queryIdx）
        query_keypoints: 变换图像关键点
        matches: 待绘制的匹配
        save_path: 保存路径

    Returns:
        vis_img: 匹配可视化图像
    """
    vis_img = cv2.drawMatches(
        query, list(query_keypoints),
        source, list(source_keypoints),
        list(matches), None,
        matchColor=(0, 255, 0),
        flags=cv2.DrawMatchesFlags_NOT_DRAW_SINGLE_POINTS
    )

    cv2.putText(vis_img, f"Matches: {len(matches)}",
                (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2)

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        cv2.imwrite(str(save_path), vis_img)

    return vis_img

def plot_statistics_element(stats: CollectedStatistics, element: StatisticsElement,
                            save_path: Optional[str] = None) -> plt.Figure:
    """绘制某统计项随变换参数变化的曲线，每个算法一条"""
    series = stats.average_across_images(element)
    arguments = stats.argument_values()

    fig, ax = plt.subplots(figsize=(10, 6))
    for algorithm_name, values in series.items():
        points = [(a, v) for a, v in zip(arguments, values) if a is not None and v is not None]
        if not points:
            continue
        xs, ys = zip(*points)
        ax.plot(xs, ys, marker='o', markersize=3, label=algorithm_name)

    title = element.value.replace('_', ' ').title()
    ax.set_title(f"{stats.name}: {title}" if stats.name else title)
    ax.set_xlabel('Argument')
    ax.set_ylabel(title)
    ax.grid(True, alpha=0.3)
    if series:
        ax.legend()

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig

def save_statistics_plots(stats: CollectedStatistics, output_dir: Path,
                          elements: Optional[List[StatisticsElement]] = None) -> Dict[str, Path]:
    """为每个统计项保存一张PNG"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {}

    for element in elements or PLOT_ELEMENTS:
        path = output_dir / f"{element.value}.png"
        fig = plot_statistics_element(stats, element, save_path=str(path))
        plt.close(fig)
        paths[element.value] = path

    return paths
