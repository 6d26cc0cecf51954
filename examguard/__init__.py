"""ExamGuard - webcam proctoring service"""

__version__ = "1.0.0"
