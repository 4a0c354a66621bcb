from prometheus_client import Counter

MESOCYCLES_CREATED_TOTAL = Counter(
    "mesocycles_created_total",
    "Number of mesocycles created in training-service",
)

MESOCYCLE_RUNS_TOTAL = Counter(
    "mesocycle_runs_total",
    "Number of mesocycle runs started or closed in training-service",
    ["event"],  # started | stopped | auto_completed
)

TRAINING_SESSIONS_FINISHED_TOTAL = Counter(
    "training_sessions_finished_total",
    "Number of training sessions finished in training-service",
    ["mode"],  # finish | update
)

TRAINING_SETS_LOGGED_TOTAL = Counter(
    "training_sets_logged_total",
    "Number of session sets marked completed",
)

EXERCISE_CACHE_HITS_TOTAL = Counter(
    "exercise_cache_hits_total",
    "Number of Redis cache hits for exercise lists",
)

EXERCISE_CACHE_MISSES_TOTAL = Counter(
    "exercise_cache_misses_total",
    "Number of Redis cache misses for exercise lists",
)

EXERCISE_CACHE_ERRORS_TOTAL = Counter(
    "exercise_cache_errors_total",
    "Number of Redis cache errors for exercise lists",
)
