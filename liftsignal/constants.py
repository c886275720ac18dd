# liftsignal/constants.py

# Rolling volume windows, in observations
SHORT_VOLUME_WINDOW = 7
LONG_VOLUME_WINDOW = 30

# The long window is expressed as a weekly rate before comparing it to the short one
CHRONIC_WEEKS = 4

# Trend fit uses at most this many trailing e1RM values
TREND_LOOKBACK = 12
SLOPE_DECIMALS = 4
RATIO_DECIMALS = 3

# Plateau: compare the last block of e1RM values with the block before it
PLATEAU_MIN_OBSERVATIONS = 8
PLATEAU_BLOCK_SIZE = 4

# Fatigue ladder. Each rung adds its points on top of the lower rungs.
ACUTE_CHRONIC_LADDER = [
    (1.2, 15),
    (1.4, 20),
    (1.6, 25),
]
NEGATIVE_SLOPE_POINTS = 15
STEEP_DECLINE_SLOPE = -0.25
STEEP_DECLINE_POINTS = 10
RPE_LOOKBACK = 4
RPE_LADDER = [
    (8.5, 15),
    (9.0, 10),
]
LOW_OBSERVATION_THRESHOLD = 6
LOW_OBSERVATION_POINTS = 10

SCORE_MIN = 0
SCORE_MAX = 100

# Confidence / data quality
CONFIDENCE_PER_OBSERVATION = 5
CONFIDENCE_VOLUME_CAP = 60
RECENCY_WINDOW_DAYS = 10
RECENCY_BONUS = 20
HIGH_QUALITY_MIN_OBSERVATIONS = 12
MEDIUM_QUALITY_MIN_OBSERVATIONS = 6

DEFAULT_LIFT_KEY = "bench"
NO_DATA_MESSAGE = "No data"
