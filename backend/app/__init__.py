"""
Habit tracker backend application package
"""
