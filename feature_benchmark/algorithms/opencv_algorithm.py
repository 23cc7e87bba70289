"""
OpenCV特征算法适配器
封装OpenCV检测器、描述子提取器和匹配器
"""

from typing import Dict, Any, List, Optional, Sequence, Tuple
import cv2
import numpy as np

from .algorithm_base import FeatureAlgorithm, Keypoints, Matches

# 算法名 -> cv2中的工厂函数路径
FEATURE_FACTORIES = {
    'SIFT': 'SIFT_create',
    'ORB': 'ORB_create',
    'BRISK': 'BRISK_create',
    'AKAZE': 'AKAZE_create',
    'KAZE': 'KAZE_create',
    'FAST': 'FastFeatureDetector_create',
    'GFTT': 'GFTTDetector_create',
    'SURF': 'xfeatures2d.SURF_create',
    'FREAK': 'xfeatures2d.FREAK_create',
    'BRIEF': 'xfeatures2d.BriefDescriptorExtractor_create',
}

# 仅能检测、不能计算描述子的算法
DETECTOR_ONLY = {'FAST', 'GFTT'}

# 二进制描述子默认使用汉明距离
BINARY_DESCRIPTORS = {'ORB', 'BRISK', 'AKAZE', 'FREAK', 'BRIEF'}

NORM_TYPES = {
    'l1': cv2.NORM_L1,
    'l2': cv2.NORM_L2,
    'hamming': cv2.NORM_HAMMING,
    'hamming2': cv2.NORM_HAMMING2,
}

FLANN_INDEX_KDTREE = 1
FLANN_INDEX_LSH = 6

def create_feature2d(name: str, params: Optional[Dict[str, Any]] = None):
    """按名称创建OpenCV Feature2D对象"""
    if name not in FEATURE_FACTORIES:
        raise ValueError(f"Unknown feature algorithm: {name}")

    factory = cv2
    for attr in FEATURE_FACTORIES[name].split('.'):
        factory = getattr(factory, attr, None)
        if factory is None:
            raise ValueError(f"Feature algorithm {name} is not available in this OpenCV build "
                             f"(cv2 {cv2.__version__})")
    return factory(**(params or {}))

def default_norm(extractor_name: str) -> int:
    """根据描述子类型选择默认距离"""
    return cv2.NORM_HAMMING if extractor_name in BINARY_DESCRIPTORS else cv2.NORM_L2

def create_matcher(matcher_type: str, norm_type: int, cross_check: bool = False):
    """
    创建描述子匹配器

    Args:
        matcher_type: 'bf' 或 'flann'
        norm_type: OpenCV距离类型
        cross_check: 是否交叉验证（仅BF支持）

    Returns:
        matcher: cv2.DescriptorMatcher
    """
    if matcher_type == 'bf':
        return cv2.BFMatcher(norm_type, crossCheck=cross_check)
    if matcher_type == 'flann':
        if norm_type in (cv2.NORM_HAMMING, cv2.NORM_HAMMING2):
            index_params = dict(algorithm=FLANN_INDEX_LSH, table_number=6,
                                key_size=12, multi_probe_level=1)
        else:
            index_params = dict(algorithm=FLANN_INDEX_KDTREE, trees=5)
        search_params = dict(checks=50)
        return cv2.FlannBasedMatcher(index_params, search_params)
    raise ValueError(f"Unknown matcher type: {matcher_type}")

class OpenCVFeatureAlgorithm(FeatureAlgorithm):
    """基于OpenCV的检测器+描述子+匹配器组合"""

    def __init__(self, name: str, detector, matcher, extractor=None,
                 knn_match_supported: bool = False, use_flann: bool = False,
                 config: Optional[Dict[str, Any]] = None):
        super().__init__(name, knn_match_supported, config)
        self.detector = detector
        self.extractor = extractor
        self.matcher = matcher
        self.use_flann = use_flann

    def extract_features(self, image: np.ndarray) -> Tuple[Keypoints, Optional[np.ndarray]]:
        if self.extractor is None:
            keypoints, descriptors = self.detector.detectAndCompute(image, None)
        else:
            keypoints = self.detector.detect(image, None)
            if not keypoints:
                return [], None
            keypoints, descriptors = self.extractor.compute(image, keypoints)

        if not keypoints or descriptors is None or len(descriptors) == 0:
            return [], None
        return list(keypoints), descriptors

    def _prepare(self, descriptors: np.ndarray) -> np.ndarray:
        # KD-tree索引只接受float32
        if self.use_flann and descriptors.dtype != np.uint8 and descriptors.dtype != np.float32:
            return descriptors.astype(np.float32)
        return descriptors

    def match_features(self, train_descriptors: np.ndarray,
                       query_descriptors: np.ndarray) -> Matches:
        matches = self.matcher.match(self._prepare(query_descriptors),
                                     self._prepare(train_descriptors))
        return list(matches)

    def knn_match_features(self, train_descriptors: np.ndarray,
                           query_descriptors: np.ndarray, k: int = 2) -> List[Sequence[cv2.DMatch]]:
        knn_matches = self.matcher.knnMatch(self._prepare(query_descriptors),
                                            self._prepare(train_descriptors), k=k)
        return [list(pair) for pair in knn_matches]

def create_algorithm(config: Dict[str, Any]) -> OpenCVFeatureAlgorithm:
    """
    根据配置创建特征算法

    配置示例:
        {'name': 'ORB_BF', 'detector': 'ORB', 'detector_params': {'nfeatures': 1000},
         'matcher': 'bf', 'cross_check': True, 'knn': False}
    """
    detector_name = config['detector']
    extractor_name = config.get('extractor') or detector_name
    name = config.get('name', f"{detector_name}_{extractor_name}")
    knn = bool(config.get('knn', False))
    matcher_type = config.get('matcher', 'bf')

    if extractor_name in DETECTOR_ONLY:
        raise ValueError(f"{extractor_name} cannot compute descriptors, configure an extractor for {name}")

    detector = create_feature2d(detector_name, config.get('detector_params'))
    extractor = None
    if extractor_name != detector_name:
        extractor = create_feature2d(extractor_name, config.get('extractor_params'))

    norm = config.get('norm')
    if norm is None:
        norm_type = default_norm(extractor_name)
    elif norm in NORM_TYPES:
        norm_type = NORM_TYPES[norm]
    else:
        raise ValueError(f"Unknown norm type: {norm}")

    # OpenCV的交叉验证只支持k=1
    cross_check = bool(config.get('cross_check', False)) and not knn
    matcher = create_matcher(matcher_type, norm_type, cross_check)

    return OpenCVFeatureAlgorithm(
        name=name,
        detector=detector,
        matcher=matcher,
        extractor=extractor,
        knn_match_supported=knn,
        use_flann=(matcher_type == 'flann'),
        config=config
    )

def create_algorithms(config_list: List[Dict[str, Any]]) -> List[OpenCVFeatureAlgorithm]:
    """根据配置列表创建全部算法"""
    return [create_algorithm(item) for item in config_list]
