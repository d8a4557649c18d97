"""
Board core: view policy, filter/sort, timeline layout, form validation
and the state-owning TaskBoard.
"""
