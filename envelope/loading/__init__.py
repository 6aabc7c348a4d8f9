"""Scene transition pipeline."""

from envelope.loading.progress import ProgressSmoother, format_progress_label, map_true_progress
from envelope.loading.transition import SceneTransitionPipeline, TransitionTicket, load_scene

__all__ = [
    "ProgressSmoother",
    "SceneTransitionPipeline",
    "TransitionTicket",
    "format_progress_label",
    "load_scene",
    "map_true_progress",
]
