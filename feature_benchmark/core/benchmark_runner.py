"""
评测系统主流程
加载图像、运行各算法的变换扫描或直接对比，并输出报告
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, Sequence
import numpy as np

from ..algorithms.opencv_algorithm import create_algorithms
from ..transforms.image_transforms import create_transformations
from ..evaluation.homography_classifier import HomographyClassifier
from ..stats.collected_statistics import CollectedStatistics
from ..stats.frame_statistics import StatisticsElement
from ..stats.report_writer import write_reports, build_summary, save_summary
from ..utils.config_manager import ConfigManager
from ..utils.data_converter import ImageProcessor
from ..utils.performance_monitor import PerformanceMonitor
from ..utils.visualization import save_statistics_plots, visualize_matches
from ..version import __version__, get_version_info
from .estimation import perform_estimation, perform_comparison

MODES = ('sweep', 'compare')
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def _directory_name(name: str) -> str:
    return name.strip().lower().replace(' ', '_')

class BenchmarkRunner:
    """特征算法鲁棒性评测主类"""

    def __init__(self, config: Dict[str, Any], save_dir: Optional[str] = None):
        """初始化评测系统"""
        self.config = config
        output_config = config.get('output', {})
        self.save_dir = Path(save_dir or output_config.get('output_dir', 'results'))
        self.save_dir.mkdir(parents=True, exist_ok=True)

        self.eval_config = config.get('evaluation', {})
        self.save_plots = output_config.get('save_plots', True)
        self.save_match_images = output_config.get('save_match_images', False)

        self._init_logging()
        self._init_core_components()

        # 图像标识 -> 灰度图 / 原始路径
        self.images: Dict[str, np.ndarray] = {}
        self.image_paths: Dict[str, str] = {}

    def _init_logging(self):
        """初始化日志系统"""
        level_name = str(self.config.get('logging', {}).get('level', 'INFO')).upper()
        level = getattr(logging, level_name, logging.INFO)
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            handlers=[
                logging.StreamHandler()
            ]
        )
        self.logger = logging.getLogger('FeatureBenchmark')
        self.logger.setLevel(level)

        # 每次评测单独写入输出目录下的日志文件
        self.log_handler = logging.FileHandler(self.save_dir / "benchmark.log")
        self.log_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(self.log_handler)

    def _init_core_components(self):
        """初始化核心组件，配置错误在此处抛出ValueError"""
        self.algorithms = create_algorithms(self.config.get('algorithms', []))
        self.transformations = create_transformations(self.config.get('transformations') or [])
        self.classifier = HomographyClassifier(self.eval_config)
        self.perf_monitor = PerformanceMonitor(
            memory_limit_gb=self.eval_config.get('max_memory_gb', 8.0)
        )

        self.logger.info(f"Loaded {len(self.algorithms)} algorithms, "
                         f"{len(self.transformations)} transformations")

    def load_images(self, image_paths: Sequence[str]) -> Dict[str, np.ndarray]:
        """
        读取并转换为灰度图，无法解码的图像跳过

        Returns:
            images: 图像标识 -> 灰度图，保持输入顺序
        """
        images, paths = {}, {}
        for path in image_paths:
            image = ImageProcessor.load_image(path)
            if image is None:
                self.logger.warning(f"Cannot read image {path}, skipped")
                continue

            gray = ImageProcessor.to_uint8(ImageProcessor.to_grayscale(image))

            # 同名文件追加序号
            image_id = ImageProcessor.image_id(path)
            candidate, suffix = image_id, 1
            while candidate in images:
                candidate = f"{image_id}_{suffix}"
                suffix += 1
            images[candidate] = gray
            paths[candidate] = str(path)

        self.images = images
        self.image_paths = paths
        return images

    def run_sweep(self, images: Dict[str, np.ndarray]) -> Dict[str, CollectedStatistics]:
        """对每个变换模型运行全部(算法, 图像)扫描"""
        results = {}

        for transformation in self.transformations:
            stats = CollectedStatistics(name=transformation.name)
            self.logger.info(f"Transformation: {transformation.name} "
                             f"({len(transformation.parameter_values())} values)")

            for algorithm in self.algorithms:
                self.logger.info(f"Testing {algorithm.name}...")

                for image_id, image in images.items():
                    run = perform_estimation(algorithm, transformation, image,
                                             self.classifier, self.eval_config)
                    if run is None:
                        continue
                    stats.record_run(algorithm.name, image_id, run)
                    self.perf_monitor.log_timings(
                        f"extraction_{algorithm.name}",
                        [stat.consumed_time_ms for stat in run.valid_entries()
                         if stat.consumed_time_ms is not None]
                    )

            results[transformation.name] = stats

        return results

    def run_comparison(self, reference: np.ndarray,
                       test_images: Dict[str, np.ndarray]) -> CollectedStatistics:
        """参考图与每幅测试图直接对比"""
        stats = CollectedStatistics(name='comparison')
        matches_dir = self.save_dir / 'matches'

        for algorithm in self.algorithms:
            self.logger.info(f"Testing {algorithm.name}...")

            for image_id, image in test_images.items():
                run = stats.get_statistics(algorithm.name, image_id)
                evaluation = perform_comparison(algorithm, image, reference,
                                                self.classifier, run, self.eval_config)
                if evaluation is None:
                    continue

                if evaluation.stats.consumed_time_ms is not None:
                    self.perf_monitor.log_timing(f"extraction_{algorithm.name}",
                                                 evaluation.stats.consumed_time_ms)

                if self.save_match_images and evaluation.stats.is_valid:
                    visualize_matches(
                        image, evaluation.source_keypoints,
                        reference, evaluation.query_keypoints,
                        evaluation.correct_matches,
                        save_path=str(matches_dir / f"{image_id}_{algorithm.name}.jpg")
                    )

        return stats

    def run(self, reference_path: str, test_paths: Sequence[str] = (),
            mode: str = 'sweep') -> Dict[str, CollectedStatistics]:
        """
        运行评测

        Args:
            reference_path: 参考图像路径
            test_paths: 测试图像路径
            mode: sweep 对所有图像做合成变换扫描，compare 参考图对比测试图

        Returns:
            results: 结果名 -> 聚合统计
        """
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")

        try:
            images = self.load_images([reference_path] + list(test_paths))
            if not images:
                raise RuntimeError("No readable images")

            if mode == 'sweep':
                results = self.run_sweep(images)
            else:
                image_ids = list(images.keys())
                if self.image_paths[image_ids[0]] != str(reference_path) or len(image_ids) < 2:
                    # 参考图读取失败或没有测试图
                    self.logger.warning("Comparison needs a readable reference and at least one test image")
                    results = {}
                else:
                    reference = images[image_ids[0]]
                    test_images = {image_id: images[image_id] for image_id in image_ids[1:]}
                    results = {'comparison': self.run_comparison(reference, test_images)}

            self._save_results(results, mode)
        finally:
            self.close()

        return results

    def close(self):
        """关闭日志文件"""
        self.logger.removeHandler(self.log_handler)
        self.log_handler.close()

    def _log_average(self, stats: CollectedStatistics):
        """输出各算法的平均单应偏差"""
        averages = stats.average_per_algorithm(StatisticsElement.HOMOGRAPHY_ERROR)
        for name, value in averages.items():
            if value is None:
                self.logger.info(f"[{stats.name}] {name}: average homography error -")
            else:
                self.logger.info(f"[{stats.name}] {name}: average homography error {value:.6f}")

    def _save_results(self, results: Dict[str, CollectedStatistics], mode: str):
        """保存报告、曲线图和摘要"""
        summary = {
            'version': __version__,
            'version_info': get_version_info(),
            'mode': mode,
            'images': list(self.images.keys()),
            'results': {},
        }

        for name, stats in results.items():
            if stats.is_empty():
                self.logger.warning(f"[{name}] no statistics recorded")
                continue

            result_dir = self.save_dir / _directory_name(name)
            write_reports(stats, result_dir)
            if self.save_plots and mode == 'sweep':
                save_statistics_plots(stats, result_dir / 'plots')

            self._log_average(stats)
            summary['results'][name] = build_summary(stats)

        summary['performance'] = self.perf_monitor.generate_report()
        for warning in summary['performance']['warnings']:
            self.logger.warning(warning)

        save_summary(summary, self.save_dir / 'summary.yaml')
        self.logger.info(f"Results saved to {self.save_dir}")

    @classmethod
    def from_config_file(cls, config_path: str, save_dir: Optional[str] = None):
        """从配置文件创建评测系统"""
        config = ConfigManager.load_config(config_path)

        return cls(config, save_dir)
