"""
Pydantic schema definitions for API payloads and stored records.

Schemas are separated from persistence: the record store works with
plain dictionaries and the services convert them to these models.
"""
