"""Content calendar scheduler - отложенная публикация и массовые рассылки"""

__version__ = "1.0.0"
