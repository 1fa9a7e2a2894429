"""Core module - конфигурация, логирование, исключения, время"""
