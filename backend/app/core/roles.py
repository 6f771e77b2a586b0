ROLE_COACH = "coach"
