"""ClipQA - serve short video clips and collect questions about them"""

__version__ = "1.0.0"
