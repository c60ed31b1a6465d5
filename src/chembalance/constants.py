"""Package-wide constants."""

HISTORY_CAPACITY = 30  # recent equation signatures sent as exclusions
DEFAULT_BATCH_SIZE = 5
SCORE_PER_CORRECT = 10
DEFAULT_DIFFICULTY = "medium"

ELECTRON = "e"
OXYGEN = "O"
HYDROGEN = "H"
