"""Data models for systemd units and hardening options."""

from .service import FragmentKind, ServiceUnit
from .options import HardeningOptions, OptionWithValue

__all__ = ["FragmentKind", "ServiceUnit", "HardeningOptions", "OptionWithValue"]
