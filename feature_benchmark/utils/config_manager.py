"""
配置管理器
统一的配置文件加载和管理
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger('FeatureBenchmark')

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'configs' / 'default.yaml'

class ConfigManager:
    """配置管理器"""

    REQUIRED_SECTIONS = ['algorithms', 'transformations', 'evaluation']

    @staticmethod
    def load_config(config_path: str) -> Dict[str, Any]:
        """
        加载YAML配置文件

        Args:
            config_path: 配置文件路径

        Returns:
            config: 配置字典
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        # 处理继承关系
        if 'inherit_from' in config:
            parent_path = config_path.parent / config['inherit_from']
            parent_config = ConfigManager.load_config(parent_path)
            config = ConfigManager.merge_configs(parent_config, config)
            del config['inherit_from']  # 移除继承标记

        return config

    @staticmethod
    def load_default_config() -> Dict[str, Any]:
        """加载随仓库提供的默认配置"""
        return ConfigManager.load_config(DEFAULT_CONFIG_PATH)

    @staticmethod
    def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
        """递归合并配置字典，列表整体覆盖"""
        merged = base_config.copy()

        for key, value in override_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = ConfigManager.merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> bool:
        """验证配置有效性"""
        for section in ConfigManager.REQUIRED_SECTIONS:
            if section not in config:
                logger.warning(f"Missing required section '{section}' in config")
                return False

        if not config['algorithms']:
            logger.warning("No algorithms configured")
            return False

        for index, algorithm in enumerate(config['algorithms']):
            if 'detector' not in algorithm:
                logger.warning(f"Algorithm #{index} has no 'detector' entry")
                return False

        for index, transformation in enumerate(config['transformations'] or []):
            if 'type' not in transformation:
                logger.warning(f"Transformation #{index} has no 'type' entry")
                return False

        ratio = config['evaluation'].get('ratio_threshold', 0.75)
        if not 0.0 < ratio <= 1.0:
            logger.warning(f"Ratio test threshold out of range: {ratio}")
            return False

        return True

    @staticmethod
    def save_config(config: Dict[str, Any], save_path: str):
        """保存配置到文件"""
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.dump(config, f, default_flow_style=False, allow_unicode=True, indent=2)
