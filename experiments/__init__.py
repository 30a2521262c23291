"""Experiment harness: scenario sweeps and replication reports for bank_sim."""
