from .participant import Participant
from .prediction import Prediction
from .correct_answer import CorrectAnswer
from .game_settings import GameSettings
from .log_entry import LogEntry

__all__ = [
	"Participant",
	"Prediction",
	"CorrectAnswer",
	"GameSettings",
	"LogEntry",
]
