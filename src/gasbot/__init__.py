"""Gas price tracker bot: samples gas, keeps a 7-day window, alerts on new extrema."""
