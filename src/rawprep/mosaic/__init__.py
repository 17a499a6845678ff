from .channels import channel_index_map, split_cfa_channels
from .extract import MosaicExtractor, extract_bayer_channels

__all__ = ["MosaicExtractor", "extract_bayer_channels", "channel_index_map", "split_cfa_channels"]
