"""HTTP service for trend segmentation and relative-strength ranking."""
