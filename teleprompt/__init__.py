from .domain import Frame, PlaybackState, ScheduleEntry, Section, Token, TokenPosition
from .pacing import Schedule, build_schedule, estimate_syllables, schedule_tokens, word_weight
from .playback import PlaybackClock, ScrollProjector, TimerQueue
from .script import ParsedScript, build_script, parse_script
from .session import TeleprompterSession
