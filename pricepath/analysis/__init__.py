from .historical import HistoricalMetrics, estimate_historical_metrics
from .sentiment_bias import calculate_sentiment_bias, classify_mention
from .scenarios import ScenarioCalibration, calibrate_scenarios
from .paths import PathGenerator
from .probability import assign_probabilities
from .signal import apply_resolved_direction, resolve_direction
from .price_paths import PricePathSimulator, simulate_price_paths
