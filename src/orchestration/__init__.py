"""Dagster orchestration for scheduled reminder passes."""
