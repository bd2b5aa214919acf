"""
Task subsystem.

Components:
- models.py: data structures (Task, TaskStats, TaskPage)
- task_api.py: stateless wire calls for every /tasks endpoint
- board.py: recent-task cache + stats snapshot, refreshed after every mutation
- refresher.py: polling loop that refreshes the board in the background
"""
