"""Configuration settings for the SoundLab signal pipeline."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables."""
    
    # Audio settings
    sample_rate: int = 44100  # Hz, 44100 signal samples per second
    bit_depth: int = 16  # 16-bit PCM
    channels: int = 2  # stereo
    
    # Filter settings
    filter_width: int = 2  # smoothing order, ratio = 0.1 ** width
    filter_kind: str = "low"  # "low" or "high"
    tee_max_lag: Optional[int] = None  # None = unbounded (memory is the limit)
    
    # Spectral analysis settings
    fft_window_size: int = 2048  # samples per analysis window
    analyzer_max_workers: Optional[int] = None  # None = ThreadPoolExecutor default
    
    # Experiment files
    input_file: str = "./data/audio-input.wav"
    output_dir: str = "./output"
    sinewave_frequency: float = 440.0  # A4
    sinewave_seconds: int = 5
    
    # Performance settings
    processing_warn_ms: int = 1000  # Warn when a pipeline step is slower than this
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SOUNDLAB_"


settings = Settings()
