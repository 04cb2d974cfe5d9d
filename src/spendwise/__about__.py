__title__ = "SpendWise"
__version__ = "1.0.0"
