"""
匹配过滤
基于最近邻/次近邻距离比的歧义匹配剔除
"""

from typing import List, Optional, Sequence
import cv2

DEFAULT_MAX_RATIO = 0.75

def ratio_test(knn_matches: Sequence[Sequence[cv2.DMatch]],
               max_ratio: float = DEFAULT_MAX_RATIO) -> List[cv2.DMatch]:
    """
    Lowe比率测试

    Args:
        knn_matches: 每个查询描述子的(最佳, 次佳)匹配对，按距离升序
        max_ratio: 距离比阈值

    Returns:
        good_matches: 通过测试的最佳匹配，保持输入顺序
    """
    good_matches = []

    for pair in knn_matches:
        # 候选不足两个时无法判断歧义
        if len(pair) < 2:
            continue

        best, second = pair[0], pair[1]
        # 次佳距离为0说明两者完全相同
        if second.distance <= 0:
            continue

        if best.distance / second.distance <= max_ratio:
            good_matches.append(best)

    return good_matches

def ratio_test_false_level(total_pairs: int, accepted: int) -> Optional[float]:
    """被比率测试剔除的比例，输入为空时返回None"""
    if total_pairs <= 0:
        return None
    return float(total_pairs - accepted) / float(total_pairs)
