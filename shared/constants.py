"""
Hamlet - Shared Constants
Constants used by the village engine, its collaborators and the tests.
"""

# Needs System
NEED_MIN = 0.0
NEED_MAX = 100.0
NEED_CRITICAL_THRESHOLD = 20.0
NEED_MEMORY_WINDOW_HOURS = 3.0  # Repeated fulfillment inside this window is less effective
NEED_DIMINISHING_FACTOR = 0.7
DEFAULT_GRADUAL_RATE_PER_HOUR = 10.0

# Passive recovery rates (need points per sim hour)
SLEEP_REST_RATE = 15.0
RELAX_REST_RATE = 5.0
SOCIAL_RECOVERY_RATE = 10.0

# Economy
PRICE_FLOOR_FACTOR = 0.5
PRICE_CEILING_FACTOR = 3.0
PRICE_HYSTERESIS = 0.1  # Smaller price moves are not committed
PRICE_SCARCITY_NUMERATOR = 100.0
PRICE_SCARCITY_OFFSET = 50.0
RESOURCE_SOFT_FLOOR = 20.0
HISTORY_CAPACITY = 30  # One sample per simulated day

# Mood
MOOD_UNHAPPY_BELOW = 30.0
MOOD_HAPPY_ABOVE = 70.0
MOOD_SMOOTHING_RATE = 0.1
MOOD_HISTORY_LENGTH = 10
MOOD_HISTORY_INTERVAL = 3.0  # real seconds
UNEMPLOYED_WORK_SATISFACTION = 40.0
EMPLOYED_WORK_SATISFACTION = 60.0
NO_GOAL_SATISFACTION = 50.0

# Goals
MAX_ACTIVE_GOALS = 2
GOAL_CHECK_INTERVAL = 5.0  # real seconds
GOAL_BOOST_MIN = 20.0
GOAL_BOOST_MAX = 30.0
GOAL_BOOST_DURATION = 30.0  # real seconds
GOAL_REASSIGN_MIN_DELAY = 15.0
GOAL_REASSIGN_MAX_DELAY = 45.0
SOCIAL_PROGRESS_PER_CHECK = 0.05
WORK_MASTERY_PER_CYCLE = 5.0

# Behavior
MINIMUM_STATE_DURATION = 0.5  # real seconds before a different state may replace the current one
BEHAVIOR_CHECK_INTERVAL = 4.0  # real seconds
MOVEMENT_TIMEOUT = 10.0  # real seconds before giving up on a destination
NEED_FULFILLMENT_DURATION = 3.0  # real seconds spent at the need location
WORKING_URGENCY_INTERRUPT = 0.7

# Time
DAY_LENGTH_SECONDS = 300.0  # 5 real minutes per simulated day
START_HOUR = 6.0
