#!/usr/bin/env python3
"""
Feature Benchmark 启动脚本

使用方法:
python run_benchmark.py reference.png test1.png test2.png
python run_benchmark.py reference.png test.png --mode compare
python run_benchmark.py --help  # 显示帮助信息
"""

import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from feature_benchmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
