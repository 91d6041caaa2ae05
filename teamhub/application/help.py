"""Static guidance returned for "help" commands."""

HELP_TEXT = """I can help you manage tasks! Here are some commands you can use:

**Create Tasks:**
• "Create a task to fix the login bug"
• "Add a new task called 'Update homepage' with description 'Redesign the homepage'"
• "Make a task to review code assigned to John"

**Update Tasks:**
• "Update task [taskId] description: New description"
• "Change task 'Fix login' status to in-progress"

**Move Tasks:**
• "Move task [taskId] to done"
• "Move task 'Fix login' to in progress"

**Assign Tasks (Managers):**
• "Assign task [taskId] to John"
• "Give task 'Fix login' to Sarah"

**Delete Tasks (Admins):**
• "Delete task [taskId]"
• "Remove task 'Fix login'"

**List Tasks:**
• "Show me all tasks"
• "Show my tasks"
• "List all todo tasks"

**Note:** You can use task titles instead of IDs for most commands!"""
