from .logger import configure_logging, get_logger
from .common_utils import display_elapsed_time, format_clock
from .timeline_utils import build_timeline, print_timeline, save_timeline_to_csv
