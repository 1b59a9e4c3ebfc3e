# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
from ._witness import lazy_witness

__all__ = ["lazy_witness"]
