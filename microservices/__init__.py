"""Task hub microservices: auth_service, task_service, notification_service"""
