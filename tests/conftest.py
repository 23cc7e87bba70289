"""
pytest配置文件
定义测试夹具和全局配置
"""

import pytest
import sys
from pathlib import Path
import cv2
import numpy as np

# 添加项目路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

def make_textured_image(height: int = 480, width: int = 640, seed: int = 0) -> np.ndarray:
    """生成角点丰富的确定性灰度图"""
    rng = np.random.RandomState(seed)
    image = np.full((height, width), 30, dtype=np.uint8)

    for _ in range(80):
        x1, y1 = int(rng.randint(0, width - 20)), int(rng.randint(0, height - 20))
        x2 = int(min(width - 1, x1 + rng.randint(10, 80)))
        y2 = int(min(height - 1, y1 + rng.randint(10, 80)))
        cv2.rectangle(image, (x1, y1), (x2, y2), int(rng.randint(60, 255)), -1)

    for _ in range(40):
        center = (int(rng.randint(0, width)), int(rng.randint(0, height)))
        cv2.circle(image, center, int(rng.randint(5, 30)), int(rng.randint(0, 255)), -1)

    for _ in range(30):
        p1 = (int(rng.randint(0, width)), int(rng.randint(0, height)))
        p2 = (int(rng.randint(0, width)), int(rng.randint(0, height)))
        cv2.line(image, p1, p2, int(rng.randint(0, 255)), 2)

    return image

@pytest.fixture
def textured_image():
    """样例灰度图像fixture"""
    return make_textured_image()

@pytest.fixture
def sample_images():
    """两幅不同的样例图像"""
    return make_textured_image(seed=0), make_textured_image(seed=1)

@pytest.fixture
def sample_config():
    """小规模评测配置fixture"""
    return {
        'algorithms': [
            {
                'name': 'ORB_BF',
                'detector': 'ORB',
                'detector_params': {'nfeatures': 500},
                'matcher': 'bf',
                'cross_check': True
            },
            {
                'name': 'ORB_BF_KNN',
                'detector': 'ORB',
                'detector_params': {'nfeatures': 500},
                'matcher': 'bf',
                'knn': True
            }
        ],
        'transformations': [
            {'type': 'rotation', 'start_angle': 0, 'end_angle': 20, 'step': 10},
            {'type': 'blur', 'max_kernel_size': 2}
        ],
        'evaluation': {
            'ratio_threshold': 0.75,
            'ransac_method': 'RANSAC',
            'ransac_threshold': 3.0,
            'min_matches': 8,
            'min_inliers': 4,
            'max_homography_error': 1.0,
            'num_workers': 2,
            'chunk_size': 1
        },
        'output': {
            'save_plots': True,
            'save_match_images': False
        },
        'logging': {
            'level': 'INFO'
        }
    }
