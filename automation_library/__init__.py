"""Student Automation Library: browse, submit and react to student automations."""
