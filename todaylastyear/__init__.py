# ABOUTME: Today-vs-last-year temperature comparison client for Open-Meteo.
# ABOUTME: Package metadata; the aggregator lives in todaylastyear.aggregator.

__version__ = "0.1.0"
