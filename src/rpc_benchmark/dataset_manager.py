"""Manages the sample call set replayed against every endpoint."""
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import ConfigurationError
from .models import SampleCall


# Configure logging
logger = logging.getLogger(__name__)


# Sampled from real mainnet traffic
DEFAULT_SAMPLE_CALLS = (
    SampleCall(
        name="Uniswap V3 Pool getReserves",
        to="0xd3d2e2692501a5c9ca623199d38826e513033a17",
        data="0x0902f1ac",
    ),
    SampleCall(
        name="Uniswap V3 Quoter",
        to="0xbc708b192552e19a088b4c4b8772aeea83bcf760",
        data=(
            "0xaa3ad4e40000000000000000000000005ac34c53a04b9aaa0bf047e7291fb4e8a48f2a18"
            "000000000000000000000000a0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
            "00000000000000000000000000000000000000000000000000000000000186a0"
        ),
        gas="0xf4240",
    ),
    SampleCall(
        name="Pool Token0",
        to="0x8026a88657a21f28c9f3d1db96c43303fca0cf58",
        data="0x3850c7bd",
    ),
    SampleCall(
        name="Pool Token1",
        to="0x8026a88657a21f28c9f3d1db96c43303fca0cf58",
        data="0x1a686502",
    ),
    SampleCall(
        name="Pool Token1 Alt",
        to="0x1d42064fc4beb5f8aaf85f4617ae8b3b5b8bd801",
        data="0x1a686502",
    ),
    SampleCall(
        name="Oracle Observation 1",
        to="0x7ffe42c4a5deea5b0fec41c94c136cf115597227",
        data="0xfa6793d53280a24edf87978fd7a9123b10089e973d6fd9197d88f98386ec2ce089e3b6fb",
    ),
    SampleCall(
        name="Oracle Observation 2",
        to="0x7ffe42c4a5deea5b0fec41c94c136cf115597227",
        data="0xc815641c3280a24edf87978fd7a9123b10089e973d6fd9197d88f98386ec2ce089e3b6fb",
    ),
    SampleCall(
        name="Oracle Observation 3",
        to="0x7ffe42c4a5deea5b0fec41c94c136cf115597227",
        data="0xfa6793d5395f91b34aa34a477ce3bc6505639a821b286a62b1a164fc1887fa3a5ef713a5",
    ),
)


class DatasetManager:
    """Manages sample call loading and preparation."""

    @staticmethod
    def prepare_sample_calls(path: Optional[Union[Path, str]] = None) -> List[SampleCall]:
        """
        Return the sample calls for a run.

        Args:
            path: Optional JSON file holding a list of {name, to, data, gas?} objects.
                  The built-in mainnet sample is used when omitted.

        Returns:
            List of sample calls, in replay order.

        Raises:
            ConfigurationError: If the file is missing, malformed or empty.
        """
        if path is None:
            logger.info(f"Using {len(DEFAULT_SAMPLE_CALLS)} built-in sample calls")
            return list(DEFAULT_SAMPLE_CALLS)

        logger.info(f"Loading sample calls from: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw_calls = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Sample call file not found at {path}", config_key="sample_calls_file") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in sample call file {path}: {e}",
                                     config_key="sample_calls_file") from e

        if not isinstance(raw_calls, list) or not raw_calls:
            raise ConfigurationError(f"Sample call file {path} must contain a non-empty list",
                                     config_key="sample_calls_file")

        sample_calls = []
        for index, raw in enumerate(raw_calls):
            if not isinstance(raw, dict) or not all(raw.get(key) for key in ("name", "to", "data")):
                raise ConfigurationError(f"Sample call #{index + 1} in {path} needs 'name', 'to' and 'data'",
                                         config_key="sample_calls_file")
            sample_calls.append(SampleCall(name=raw["name"], to=raw["to"], data=raw["data"], gas=raw.get("gas")))

        logger.info(f"Prepared {len(sample_calls)} sample calls.")
        return sample_calls
