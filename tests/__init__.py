"""Test package for sentiment-chat."""
