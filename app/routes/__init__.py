"""
API Routes Package

- posts.py: Feed read and post creation

Routes are registered in main.py using FastAPI's router system.
"""
