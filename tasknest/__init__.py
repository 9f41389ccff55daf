"""
TaskNest API

Personal task records behind bearer-token authentication, persisted as flat
JSON documents.
"""
