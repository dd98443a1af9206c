"""Audio download and sense-level audio reconciliation."""

from lexigraph.services.audio.downloader import AudioDownloader, DownloadResult
from lexigraph.services.audio.reconciler import AudioReconciler, select_audio_chain

__all__ = [
    "AudioDownloader",
    "AudioReconciler",
    "DownloadResult",
    "select_audio_chain",
]
