"""
算法评估流程
合成变换参数扫描和参考图/测试图直接对比
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Sequence
import cv2
import numpy as np

from ..algorithms.algorithm_base import FeatureAlgorithm
from ..transforms.transformation_base import ImageTransformation
from ..evaluation.match_filter import ratio_test, ratio_test_false_level, DEFAULT_MAX_RATIO
from ..evaluation.homography_classifier import HomographyClassifier
from ..stats.frame_statistics import FrameMatchingStatistics, SingleRunStatistics
from ..utils.performance_monitor import default_num_workers

logger = logging.getLogger('FeatureBenchmark')

@dataclass
class SourceFeatures:
    """源图像特征，扫描期间只读共享"""
    image: np.ndarray
    keypoints: List[cv2.KeyPoint]
    descriptors: np.ndarray

@dataclass
class FrameEvaluation:
    """单帧评估结果及绘图所需数据"""
    stats: FrameMatchingStatistics
    source_keypoints: List[cv2.KeyPoint] = field(default_factory=list)
    query_keypoints: List[cv2.KeyPoint] = field(default_factory=list)
    correct_matches: List[cv2.DMatch] = field(default_factory=list)

def extract_source_features(algorithm: FeatureAlgorithm, image: np.ndarray) -> Optional[SourceFeatures]:
    """提取源图像特征，未检测到关键点时返回None"""
    keypoints, descriptors = algorithm.extract_features(image)
    if len(keypoints) == 0 or descriptors is None:
        return None
    return SourceFeatures(image=image, keypoints=keypoints, descriptors=descriptors)

def evaluate_frame(algorithm: FeatureAlgorithm, source: SourceFeatures, query_image: np.ndarray,
                   argument_value: float, classifier: HomographyClassifier,
                   expected_homography: Optional[np.ndarray] = None,
                   ratio_threshold: float = DEFAULT_MAX_RATIO) -> FrameEvaluation:
    """
    对一幅变换/测试图像执行提取、匹配和正确性分类

    Args:
        algorithm: 特征算法
        source: 源图像特征
        query_image: 变换后的灰度图像
        argument_value: 变换参数值
        classifier: 匹配分类器
        expected_homography: 真值单应，为None时不计算单应偏差
        ratio_threshold: 比率测试阈值

    Returns:
        evaluation: FrameEvaluation，无效运行只记录参数值
    """
    # 计时仅覆盖提取和匹配
    start_time = time.perf_counter()

    query_keypoints, query_descriptors = algorithm.extract_features(query_image)
    if len(query_keypoints) == 0 or query_descriptors is None:
        return FrameEvaluation(stats=FrameMatchingStatistics.invalid(argument_value))

    false_level = None
    if algorithm.knn_match_supported:
        knn_matches = algorithm.knn_match_features(source.descriptors, query_descriptors, k=2)
        end_time = time.perf_counter()
        matches = ratio_test(knn_matches, ratio_threshold)
        false_level = ratio_test_false_level(len(knn_matches), len(matches))
        logger.debug(f"{algorithm.name} @ {argument_value}: ratio test kept "
                     f"{len(matches)}/{len(knn_matches)}")
    else:
        matches = algorithm.match_features(source.descriptors, query_descriptors)
        end_time = time.perf_counter()

    result = classifier.find_homography(source.keypoints, query_keypoints, matches)
    if not result.success:
        return FrameEvaluation(stats=FrameMatchingStatistics.invalid(argument_value),
                               source_keypoints=source.keypoints, query_keypoints=query_keypoints)

    correct_matches = result.correct_matches
    min_keypoints = min(len(source.keypoints), len(query_keypoints))

    stats = FrameMatchingStatistics(
        is_valid=True,
        argument_value=float(argument_value),
        consumed_time_ms=(end_time - start_time) * 1000,
        total_keypoints=len(query_keypoints),
        matches_count=len(matches),
        percent_of_matches=len(matches) / min_keypoints if min_keypoints > 0 else None,
        correct_matches_count=len(correct_matches),
        correct_matches_percent=len(correct_matches) / len(matches) if matches else None,
        ratio_test_false_level=false_level
    )

    distance_stats = classifier.compute_distance_statistics(correct_matches)
    if distance_stats is not None:
        stats.mean_distance, stats.std_dev_distance = distance_stats

    reprojection_error = classifier.compute_reprojection_error(
        source.keypoints, query_keypoints, correct_matches, result.homography
    )
    if reprojection_error is not None:
        stats.reprojection_error = reprojection_error.as_tuple()

    if expected_homography is not None:
        stats.homography_error = classifier.compute_homography_error(
            expected_homography, result.homography
        )

    return FrameEvaluation(stats=stats, source_keypoints=source.keypoints,
                           query_keypoints=query_keypoints,
                           correct_matches=correct_matches)

def _chunk_indices(count: int, chunk_size: int) -> List[range]:
    chunk_size = max(1, int(chunk_size))
    return [range(i, min(i + chunk_size, count)) for i in range(0, count, chunk_size)]

def perform_estimation(algorithm: FeatureAlgorithm, transformation: ImageTransformation,
                       source_image: np.ndarray, classifier: HomographyClassifier,
                       config: Optional[Dict[str, Any]] = None) -> Optional[SingleRunStatistics]:
    """
    对一个(算法, 图像)执行完整参数扫描

    每个参数值独立评估，按块分配给线程池，结果写入预分配序列的对应槽位。

    Args:
        algorithm: 特征算法
        transformation: 变换模型
        source_image: 灰度源图像
        classifier: 匹配分类器
        config: evaluation配置段

    Returns:
        run: 长度等于参数个数的序列，源图像无关键点时返回None
    """
    config = config or {}
    ratio_threshold = config.get('ratio_threshold', DEFAULT_MAX_RATIO)
    num_workers = default_num_workers(config.get('num_workers'))
    chunk_size = config.get('chunk_size', 5)

    source = extract_source_features(algorithm, source_image)
    if source is None:
        logger.warning(f"{algorithm.name}: no keypoints in source image, sweep skipped")
        return None

    values = transformation.parameter_values()
    run = SingleRunStatistics.sized(len(values))

    def evaluate_index(index: int):
        value = values[index]
        try:
            transformed = transformation.transform(value, source.image)
            expected = transformation.ground_truth_homography(value, source.image)
            run[index] = evaluate_frame(algorithm, source, transformed, value, classifier,
                                        expected, ratio_threshold).stats
        except Exception as e:
            logger.warning(f"{algorithm.name} / {transformation.name} @ {value} failed: {e}")
            run[index] = FrameMatchingStatistics.invalid(value)

    def evaluate_chunk(indices: Sequence[int]):
        for index in indices:
            evaluate_index(index)

    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [executor.submit(evaluate_chunk, chunk)
                   for chunk in _chunk_indices(len(values), chunk_size)]
        for future in futures:
            future.result()

    return run

def perform_comparison(algorithm: FeatureAlgorithm, test_image: np.ndarray,
                       reference_image: np.ndarray, classifier: HomographyClassifier,
                       run: SingleRunStatistics,
                       config: Optional[Dict[str, Any]] = None) -> Optional[FrameEvaluation]:
    """
    测试图与参考图直接对比，向run追加一条参数值为0的记录

    测试图作为源图像（trainIdx），参考图作为查询图像（queryIdx），
    total_keypoints统计的是参考图的关键点数。
    真值单应未知，不计算单应偏差。测试图无关键点时不追加记录并返回None。
    """
    config = config or {}
    source = extract_source_features(algorithm, test_image)
    if source is None:
        logger.warning(f"{algorithm.name}: no keypoints in test image")
        return None

    try:
        evaluation = evaluate_frame(algorithm, source, reference_image, 0.0, classifier, None,
                                    config.get('ratio_threshold', DEFAULT_MAX_RATIO))
    except Exception as e:
        logger.warning(f"{algorithm.name}: comparison failed: {e}")
        evaluation = FrameEvaluation(stats=FrameMatchingStatistics.invalid(0.0))

    run.append(evaluation.stats)
    return evaluation
