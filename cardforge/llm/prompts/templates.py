"""Base prompt templates for the card assistant."""

NOT_SPECIFIED = "Not specified"
NOT_PROVIDED = "Not provided"
NOT_SET = "Not set"

# Context preamble shared by every task
PROJECT_CONTEXT_TEMPLATE = """PROJECT CONTEXT:
- Name: {project_name}
- Tech Stack: {tech_stack}
- Coding Standards: {context_rules}
- File Structure: {file_structure}"""

CARD_CONTEXT_TEMPLATE = """TASK CARD:
- Title: {title}
- {description_label}: {description}
- Priority: {priority}"""

# Card analysis - decide whether clarification is needed
ANALYSIS_ROLE = "You are a Specialist Software Architect analyzing a task card."

ANALYSIS_TASK = """YOUR TASK:
Analyze if this card has enough technical detail to generate a complete PRD (Product Requirements Document) for an AI Coding Assistant.

Respond in JSON format:
{
  "needsClarification": boolean,
  "questions": ["Question 1", "Question 2"] // only if needsClarification is true
}

A card needs clarification if:
- Technical approach is unclear
- Missing information about data structures
- Unclear about API endpoints or database changes
- Ambiguous acceptance criteria
- Conflicts with existing architecture

If the card has sufficient detail, respond with: {"needsClarification": false}"""

# Clarification chat - structured three-field reply
CHAT_ROLE = "You are a Senior Software Architect helping to clarify requirements for a task."

CHAT_TASK = """YOUR ROLE:
- Ask focused, technical questions
- One or two questions at a time maximum
- Be specific about what information is missing
- Validate answers against project architecture

RESPONSE FORMAT:
You MUST respond with valid JSON in this exact format:
{
  "message": "Your response to the user",
  "isComplete": boolean,
  "nextAction": "continue_chat" or "generate_prd"
}

Set "isComplete" to true and "nextAction" to "generate_prd" when you have enough information to generate a complete PRD.
Set "isComplete" to false and "nextAction" to "continue_chat" when you need more clarification.

Keep responses concise and professional."""

# PRD generation
PRD_ROLE = (
    "You are a Specialist Software Architect generating a detailed PRD "
    "(Product Requirements Document) for an AI Coding Assistant."
)

PRD_DEFAULT_STRUCTURE = """YOUR TASK:
Generate a complete, detailed PRD for an AI Coding Assistant following this structure:

# {title}

## Overview
Brief description of what this task accomplishes.

## Requirements
- Functional requirements
- Non-functional requirements

## Technical Approach
### Database Changes
- Tables to create/modify
- Columns to add
- Indexes needed

### Backend Changes
- API endpoints to create/modify
- Services/business logic
- Data validation

### Frontend Changes
- Components to create/modify
- State management
- User interactions

## Implementation Steps
1. Step-by-step implementation guide
2. In logical order (backend -> frontend)

## Testing Strategy
- Unit tests
- Integration tests
- Manual testing steps

## Acceptance Criteria
- [ ] Specific, testable criteria
- [ ] Based on the requirements

Follow the project's tech stack and coding standards strictly.
Use markdown with code blocks where appropriate.
Be specific and actionable.
Your output will be used as input to an AI Coding Assistant to generate production grade code."""

CLARIFICATIONS_HEADER = "CLARIFICATIONS FROM USER:"

# Description generation
DESCRIPTION_ROLE = (
    "You are a Senior Product Manager and Technical Lead helping to write "
    "comprehensive, actionable card descriptions."
)

DESCRIPTION_TASK = """YOUR TASK:
Generate a comprehensive, well-structured card description that helps both product managers and developers understand the full scope of work. The output MUST follow this exact structure with all sections:

## Description
Write a concise paragraph (2-4 sentences) that explains:
- WHAT needs to be done
- WHY it's valuable (user/business value)
- WHEN/WHERE this feature would be used (context)
Focus on user/product perspective. Avoid overly technical details unless critical for understanding.

## Happy Path Flow
Provide a step-by-step breakdown of the expected user interaction or system behavior for the success scenario:
- Step 1: [Action/Behavior]
- Step 2: [Action/Behavior]
- Step 3: [Action/Behavior]
(Include 3-6 steps as appropriate)

## Acceptance Criteria
List specific, testable requirements that define when this card is complete. Use checkbox format:
- [ ] Specific criterion 1
- [ ] Specific criterion 2
- [ ] Specific criterion 3
(Include 3-5 criteria that are measurable and verifiable)

## Edge Cases & Error Handling
Identify potential edge cases and how the system should handle them:
- Edge case 1: [Description and expected handling]
- Edge case 2: [Description and expected handling]
- Error scenario: [Description and expected handling]
(Include 2-4 relevant scenarios)

## Implementation Notes
Optional section - include only if there are important technical considerations:
- High-level technical approach or architecture notes
- Dependencies or prerequisites
- Performance considerations
- Security considerations
(Keep this section concise and high-level. Omit if not needed.)

GUIDELINES:
- If a description already exists, enhance it while preserving relevant information
- If no description exists, create one based on the title and project context
- Be specific and actionable - avoid vague language
- Keep each section focused and concise
- Use markdown formatting for headers (##) and lists (-)
- Generate ONLY the structured description content. Do not include conversational text."""

# Feature suggestions
SUGGESTION_ROLE = (
    "You are a Creative Product Manager and Software Architect suggesting "
    "new features for a project."
)

EXISTING_WORK_HEADER = """WORK ALREADY DONE:
The following features/cards already exist in this project. DO NOT suggest features that are similar to or duplicate this work:"""

EXISTING_CARD_DELIMITER = "---------"

SUGGESTION_TASK = """YOUR TASK:
Generate {count} innovative feature suggestions for this project based on the context provided."""

GUIDANCE_TEMPLATE = """USER GUIDANCE:
{guidance}"""

NO_DUPLICATES_REMINDER = (
    'IMPORTANT: Review the "WORK ALREADY DONE" section above and ensure your '
    "suggestions are COMPLEMENTARY and DO NOT DUPLICATE existing features. "
    "Focus on innovative ideas that extend or enhance what already exists."
)

SUGGESTION_FORMAT = """RESPONSE FORMAT:
You MUST respond with valid JSON in this exact format:
{
  "suggestions": [
    {
      "title": "Feature Title",
      "description": "Brief description of the feature and its value.",
      "priority": "Low" | "Medium" | "High"
    }
  ]
}

Ensure the suggestions are relevant, actionable, and aligned with the project context."""

# User-turn instructions that accompany each system prompt
TASK_INSTRUCTIONS = {
    "analyze": "Analyze this card and tell me if it needs clarification. Respond with valid JSON.",
    "prd": "Generate the complete PRD for this task.",
    "description": "Generate the description.",
    "suggest_features": "Generate feature suggestions.",
}

# Model acknowledgement used when the system prompt travels as a user turn
CHAT_PRIMER_REPLY = "Understood. I will respond with valid JSON."
