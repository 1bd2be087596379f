"""配置管理模块 - 处理rpbands的配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from loguru import logger

from rpbands.core.exceptions.codes import ErrorCode


@dataclass(frozen=True)
class BandMultipliers:
    """Realized price multipliers, one per composite record band field."""

    rp_0_8: float = 0.8
    rp_1_25: float = 1.25
    rp_1_7: float = 1.7
    rp_2_4: float = 2.4
    rp_3_2: float = 3.2

    def items(self) -> list[tuple[str, float]]:
        """Return ``(field_name, multiplier)`` pairs in ascending order."""
        return sorted(asdict(self).items(), key=lambda item: item[1])


@dataclass(frozen=True)
class MergeConfig:
    """Thresholds driving the merge engine and the live-tick reconciler."""

    band_multipliers: BandMultipliers = field(default_factory=BandMultipliers)
    window_start: datetime = datetime(2018, 1, 1, tzinfo=UTC)
    stride: int = 4
    min_coverage: int = 100
    live_append_after: timedelta = timedelta(hours=12)

    def __post_init__(self) -> None:
        if self.stride < 1:
            raise ValueError("stride must be at least 1")
        if self.min_coverage < 0:
            raise ValueError("min_coverage must be non-negative")
        if self.window_start.tzinfo is None:
            raise ValueError("window_start must be timezone-aware")

    @property
    def window_start_s(self) -> int:
        return int(self.window_start.timestamp())

    @property
    def live_append_after_ms(self) -> int:
        return int(self.live_append_after.total_seconds() * 1000)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "MergeConfig":
        """从字典创建配置"""
        kwargs: dict[str, Any] = {}
        if "band_multipliers" in config_dict:
            kwargs["band_multipliers"] = BandMultipliers(**config_dict["band_multipliers"])
        if "window_start" in config_dict:
            value = config_dict["window_start"]
            if isinstance(value, str):
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if value.tzinfo is None:
                value = value.replace(tzinfo=UTC)
            kwargs["window_start"] = value
        if "stride" in config_dict:
            kwargs["stride"] = int(config_dict["stride"])
        if "min_coverage" in config_dict:
            kwargs["min_coverage"] = int(config_dict["min_coverage"])
        if "live_append_after_hours" in config_dict:
            kwargs["live_append_after"] = timedelta(hours=float(config_dict["live_append_after_hours"]))
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "band_multipliers": asdict(self.band_multipliers),
            "window_start": self.window_start.isoformat(),
            "stride": self.stride,
            "min_coverage": self.min_coverage,
            "live_append_after_hours": self.live_append_after.total_seconds() / 3600,
        }


@dataclass
class FeedConfig:
    """上游数据源配置"""

    metrics_url: str = "https://charts.bgeometrics.com/files/{metric}.json"
    history_url: str = "https://api.blockchain.info/charts/market-price?timespan=all&format=json&cors=true"
    live_url: str = "https://api.coinpaprika.com/v1/tickers/btc-bitcoin"
    timeout: float = 15.0
    live_timeout: float = 8.0
    user_agent: str = "Mozilla/5.0 (compatible; rpbands/0.1.0)"
    cache_ttl: int = 3600
    cache_size: int = 16


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class RPBandsConfig:
    """rpbands主配置"""

    feeds: FeedConfig = field(default_factory=FeedConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "RPBandsConfig":
        """从字典创建配置"""
        return cls(
            feeds=FeedConfig(**config_dict.get("feeds", {})),
            merge=MergeConfig.from_dict(config_dict.get("merge", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "feeds": asdict(self.feeds),
            "merge": self.merge.to_dict(),
            "logging": {k: v for k, v in asdict(self.logging).items() if v is not None},
        }


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否叠加 RPBANDS_* 环境变量
        """
        self.config_path = config_path or Path.home() / ".rpbands" / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> RPBandsConfig:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.bind(error_code=ErrorCode.CONFIGURATION_ERROR.value).warning(
                    f"Failed to load config from {self.config_path}: {e}"
                )
                config_dict = {}

        try:
            if self.use_env:
                config_dict = _deep_update(config_dict, load_config_from_env())
            return RPBandsConfig.from_dict(config_dict)
        except (TypeError, ValueError) as e:
            logger.bind(error_code=ErrorCode.CONFIGURATION_ERROR.value).warning(
                f"Invalid configuration, falling back to defaults: {e}"
            )
            return RPBandsConfig()

    def get_config(self) -> RPBandsConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = RPBandsConfig.from_dict(config_dict)


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(dict(d.get(k, {})), v)
        else:
            d[k] = v
    return d


def get_default_config() -> RPBandsConfig:
    """获取默认配置"""
    return RPBandsConfig()


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    # 数据源配置
    feed_config: dict[str, Any] = {}
    rpbands_feed_timeout = os.getenv("RPBANDS_FEED_TIMEOUT")
    if rpbands_feed_timeout is not None:
        feed_config["timeout"] = float(rpbands_feed_timeout)
    rpbands_live_timeout = os.getenv("RPBANDS_LIVE_TIMEOUT")
    if rpbands_live_timeout is not None:
        feed_config["live_timeout"] = float(rpbands_live_timeout)
    rpbands_cache_ttl = os.getenv("RPBANDS_CACHE_TTL")
    if rpbands_cache_ttl is not None:
        feed_config["cache_ttl"] = int(rpbands_cache_ttl)

    if feed_config:
        config["feeds"] = feed_config

    # 合并配置
    merge_config: dict[str, Any] = {}
    rpbands_merge_stride = os.getenv("RPBANDS_MERGE_STRIDE")
    if rpbands_merge_stride is not None:
        merge_config["stride"] = int(rpbands_merge_stride)
    rpbands_merge_min_coverage = os.getenv("RPBANDS_MERGE_MIN_COVERAGE")
    if rpbands_merge_min_coverage is not None:
        merge_config["min_coverage"] = int(rpbands_merge_min_coverage)

    if merge_config:
        config["merge"] = merge_config

    # 日志配置
    logging_config: dict[str, Any] = {}
    rpbands_logging_level = os.getenv("RPBANDS_LOGGING_LEVEL")
    if rpbands_logging_level is not None:
        logging_config["level"] = rpbands_logging_level
    rpbands_logging_file = os.getenv("RPBANDS_LOGGING_FILE")
    if rpbands_logging_file is not None:
        logging_config["file"] = rpbands_logging_file

    if logging_config:
        config["logging"] = logging_config

    return config
