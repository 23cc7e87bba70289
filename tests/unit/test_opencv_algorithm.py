#!/usr/bin/env python3
"""
OpenCV特征算法适配器单元测试
"""

import pytest
import numpy as np
import cv2
from unittest.mock import Mock
from feature_benchmark.algorithms import (
    FeatureAlgorithm, OpenCVFeatureAlgorithm, create_algorithm, create_algorithms
)
from feature_benchmark.algorithms.opencv_algorithm import (
    create_matcher, default_norm, FLANN_INDEX_LSH
)

class TestCreateAlgorithm:
    """算法工厂测试类"""

    def test_orb_bf(self):
        algorithm = create_algorithm({
            'name': 'ORB_BF', 'detector': 'ORB',
            'detector_params': {'nfeatures': 200}, 'matcher': 'bf', 'cross_check': True
        })

        assert isinstance(algorithm, FeatureAlgorithm)
        assert algorithm.name == 'ORB_BF'
        assert algorithm.knn_match_supported == False
        assert algorithm.extractor is None

    def test_default_name(self):
        algorithm = create_algorithm({'detector': 'FAST', 'extractor': 'ORB'})

        assert algorithm.name == 'FAST_ORB'
        assert algorithm.extractor is not None

    def test_knn_forces_cross_check_off(self, textured_image):
        """knn匹配与交叉验证不能同时使用"""
        algorithm = create_algorithm({
            'detector': 'ORB', 'matcher': 'bf', 'knn': True, 'cross_check': True
        })
        keypoints, descriptors = algorithm.extract_features(textured_image)

        pairs = algorithm.knn_match_features(descriptors, descriptors, k=2)

        assert algorithm.knn_match_supported == True
        assert len(pairs) == len(keypoints)
        assert all(len(pair) == 2 for pair in pairs)

    def test_unknown_detector_raises(self):
        with pytest.raises(ValueError):
            create_algorithm({'detector': 'NOT_A_DETECTOR'})

    def test_detector_only_needs_extractor(self):
        with pytest.raises(ValueError):
            create_algorithm({'detector': 'GFTT'})

    def test_unknown_matcher_and_norm(self):
        with pytest.raises(ValueError):
            create_algorithm({'detector': 'ORB', 'matcher': 'annoy'})
        with pytest.raises(ValueError):
            create_algorithm({'detector': 'ORB', 'norm': 'cosine'})

    def test_create_algorithms(self):
        algorithms = create_algorithms([{'detector': 'ORB'}, {'detector': 'BRISK'}])
        assert [a.name for a in algorithms] == ['ORB_ORB', 'BRISK_BRISK']

class TestMatchers:
    """匹配器选择测试类"""

    def test_default_norm(self):
        assert default_norm('ORB') == cv2.NORM_HAMMING
        assert default_norm('SIFT') == cv2.NORM_L2

    def test_flann_matcher_types(self):
        assert isinstance(create_matcher('flann', cv2.NORM_L2), cv2.FlannBasedMatcher)
        assert isinstance(create_matcher('flann', cv2.NORM_HAMMING), cv2.FlannBasedMatcher)
        assert FLANN_INDEX_LSH == 6

class TestOpenCVFeatureAlgorithm:
    """OpenCVFeatureAlgorithm测试类"""

    def setup_method(self):
        self.algorithm = create_algorithm({
            'name': 'ORB_BF', 'detector': 'ORB', 'matcher': 'bf', 'cross_check': True
        })

    def test_extract_features(self, textured_image):
        keypoints, descriptors = self.algorithm.extract_features(textured_image)

        assert len(keypoints) > 0
        assert descriptors.shape[0] == len(keypoints)
        assert descriptors.dtype == np.uint8

    def test_featureless_image(self):
        """无纹理图像返回空结果而不是抛出异常"""
        keypoints, descriptors = self.algorithm.extract_features(np.zeros((100, 100), dtype=np.uint8))

        assert keypoints == []
        assert descriptors is None

    def test_self_match(self, textured_image):
        """同一图像自匹配时queryIdx与trainIdx一致"""
        _, descriptors = self.algorithm.extract_features(textured_image)

        matches = self.algorithm.match_features(descriptors, descriptors)

        assert len(matches) > 0
        same = sum(1 for m in matches if m.queryIdx == m.trainIdx)
        assert same / len(matches) > 0.95

    def test_match_argument_order(self):
        """query在前、train在后传给OpenCV"""
        matcher = Mock()
        matcher.match.return_value = []
        algorithm = OpenCVFeatureAlgorithm('mock', detector=Mock(), matcher=matcher)
        train = np.zeros((3, 32), dtype=np.uint8)
        query = np.ones((2, 32), dtype=np.uint8)

        algorithm.match_features(train, query)

        called_query, called_train = matcher.match.call_args[0]
        assert called_query is query
        assert called_train is train

    def test_flann_float_conversion(self):
        matcher = Mock()
        matcher.knnMatch.return_value = []
        algorithm = OpenCVFeatureAlgorithm('mock', detector=Mock(), matcher=matcher,
                                           knn_match_supported=True, use_flann=True)

        algorithm.knn_match_features(np.zeros((3, 8), dtype=np.float64),
                                     np.zeros((3, 8), dtype=np.float64))

        called_query, called_train = matcher.knnMatch.call_args[0]
        assert called_query.dtype == np.float32
        assert called_train.dtype == np.float32
