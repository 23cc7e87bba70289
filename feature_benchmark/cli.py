"""
命令行入口

使用方法:
feature-benchmark reference.png test1.png test2.png
feature-benchmark reference.png --config my_config.yaml --output-dir results/run1
feature-benchmark reference.png test.png --mode compare --save-matches
"""

import sys
import argparse
from pathlib import Path

from .version import __version__
from .utils.config_manager import ConfigManager

USAGE_NOTICE = """
Feature Benchmark - 特征算法鲁棒性评测
至少需要两幅图像以获得有代表性的统计结果:
  feature-benchmark reference.png test1.png [test2.png ...]
本次使用单幅图像继续运行。
"""

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='feature-benchmark',
        description="Feature Benchmark - 特征检测/描述/匹配算法鲁棒性评测",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例:
  # 对所有图像做合成变换扫描
  feature-benchmark reference.png test1.png test2.png

  # 参考图与测试图直接对比并保存匹配图
  feature-benchmark reference.png test1.png --mode compare --save-matches

  # 细粒度扫描
  feature-benchmark reference.png test1.png --config configs/verbose.yaml
        """
    )

    parser.add_argument('reference', type=str, help='参考图像路径')
    parser.add_argument('tests', type=str, nargs='*', help='测试图像路径')

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='配置文件路径 (默认: 内置default.yaml)'
    )

    parser.add_argument(
        '--mode', '-m',
        type=str,
        default='sweep',
        choices=['sweep', 'compare'],
        help='sweep: 合成变换扫描, compare: 参考图对比测试图'
    )

    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        default=None,
        help='结果保存目录'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=None,
        help='工作线程数 (默认: CPU核数)'
    )

    parser.add_argument('--verbose', '-v', action='store_true', help='输出调试日志')
    parser.add_argument('--no-plots', action='store_true', help='不保存曲线图')
    parser.add_argument('--save-matches', action='store_true', help='保存匹配可视化图像')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser.parse_args(argv)

def build_config(args):
    """加载配置并应用命令行参数覆盖"""
    if args.config:
        config = ConfigManager.load_config(args.config)
    else:
        config = ConfigManager.load_default_config()

    evaluation = config.setdefault('evaluation', {})
    output = config.setdefault('output', {})

    if args.workers is not None:
        evaluation['num_workers'] = args.workers
    if args.verbose:
        config.setdefault('logging', {})['level'] = 'DEBUG'
    if args.no_plots:
        output['save_plots'] = False
    if args.save_matches:
        output['save_match_images'] = True
    if args.output_dir:
        output['output_dir'] = args.output_dir

    return config

def main(argv=None):
    args = parse_args(argv)

    if not args.tests:
        print(USAGE_NOTICE)

    try:
        config = build_config(args)
    except FileNotFoundError as e:
        print(f"错误: {e}")
        return 1

    if not ConfigManager.validate_config(config):
        print("错误: 配置无效")
        return 1

    # 导入核心系统
    from .core.benchmark_runner import BenchmarkRunner

    try:
        runner = BenchmarkRunner(config, save_dir=config['output'].get('output_dir'))
        results = runner.run(args.reference, args.tests, mode=args.mode)
    except ValueError as e:
        print(f"配置错误: {e}")
        return 1
    except RuntimeError as e:
        print(f"错误: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\n用户中断")
        return 0

    print("\n" + "=" * 60)
    print(f"评测完成，结果保存至: {Path(runner.save_dir).resolve()}")
    for name, stats in results.items():
        print(f"  {name}: {len(stats)} runs")
    print("=" * 60)

    return 0

if __name__ == "__main__":
    sys.exit(main())
