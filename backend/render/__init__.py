from .overlay import COLOR_PALETTE, OverlayRenderer, hex_to_bgr, pose_color
from .point_cloud import plot_point_cloud, point_cloud_dataset, point_colors

__all__ = [
    'COLOR_PALETTE',
    'OverlayRenderer',
    'hex_to_bgr',
    'pose_color',
    'plot_point_cloud',
    'point_cloud_dataset',
    'point_colors',
]
