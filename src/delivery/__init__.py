"""
Terminal presentation for the piano quiz.

Components:
- quiz_visuals: Rich panels and tables for questions, feedback and reports
"""
