"""Планировщик отложенных публикаций и массовых операций"""
