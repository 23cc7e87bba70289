#!/usr/bin/env python3
"""
Feature Benchmark 基础使用示例
"""

import sys
from pathlib import Path

# 添加项目路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

def basic_benchmark_example(reference_path: str, test_paths):
    """完整评测示例"""
    print("Basic Feature Benchmark Usage Example")
    print("="*40)

    from feature_benchmark import BenchmarkRunner, ConfigManager

    config = ConfigManager.load_default_config()
    # 只保留旋转扫描以缩短运行时间
    config['transformations'] = [
        {'type': 'rotation', 'start_angle': 0, 'end_angle': 90, 'step': 15}
    ]

    runner = BenchmarkRunner(config, save_dir="example_results")
    results = runner.run(reference_path, test_paths, mode='sweep')

    for name, stats in results.items():
        print(f"{name}: {stats.algorithm_names}")

def component_usage_example(reference_path: str):
    """组件单独使用示例"""
    print("\nComponent Usage Example")
    print("="*40)

    from feature_benchmark.algorithms import create_algorithm
    from feature_benchmark.transforms import ImageRotationTransformation
    from feature_benchmark.evaluation import HomographyClassifier
    from feature_benchmark.core import perform_estimation
    from feature_benchmark.utils import ImageProcessor

    image = ImageProcessor.load_image(reference_path)
    if image is None:
        print(f"Cannot read {reference_path}")
        return
    gray = ImageProcessor.to_grayscale(image)

    algorithm = create_algorithm({'name': 'ORB_BF', 'detector': 'ORB',
                                  'matcher': 'bf', 'cross_check': True})
    rotation = ImageRotationTransformation(0, 45, 15)
    classifier = HomographyClassifier({'ransac_threshold': 3.0})

    run = perform_estimation(algorithm, rotation, gray, classifier, {'num_workers': 2})
    if run is None:
        print("No keypoints in source image")
        return

    for stat in run:
        if stat.is_valid:
            print(f"  angle={stat.argument_value:6.1f}  correct={stat.correct_matches_percent:.3f}  "
                  f"homography_error={stat.homography_error:.4f}")
        else:
            print(f"  angle={stat.argument_value:6.1f}  invalid")

def main():
    """主函数"""
    print("Feature Benchmark Examples")
    print("="*50)

    if len(sys.argv) < 2:
        print("Usage: python examples/basic_usage.py reference.png [test.png ...]")
        return

    # 组件使用
    component_usage_example(sys.argv[1])

    # 完整评测
    basic_benchmark_example(sys.argv[1], sys.argv[2:])

if __name__ == "__main__":
    main()
