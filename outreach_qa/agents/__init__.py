"""Domain analyzers, the comprehensive aggregator and the safe optimizer."""
