"""Extensions: protocol front-ends over the tool registry."""
