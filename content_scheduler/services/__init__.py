"""Сервисы: webhooks, уведомления, проспекция"""
