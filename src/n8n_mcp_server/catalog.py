"""Static catalog of built-in n8n node types and example workflows.

These tables back the local operations; answering from them never touches the
n8n API.
"""

from typing import Any, Dict, List, Optional

NODE_CATEGORIES: Dict[str, str] = {
    "Core": "Essential nodes for workflow logic and control flow",
    "Communication": "Nodes for messaging, email, and team collaboration",
    "Productivity": "Nodes for productivity tools and document management",
    "Data & Storage": "Nodes for databases and data storage systems",
    "Sales": "Nodes for CRM and sales automation",
    "AI": "Nodes for artificial intelligence and machine learning services",
    "Marketing": "Nodes for marketing automation and analytics",
    "Development": "Nodes for development tools and version control",
    "Finance": "Nodes for payment processing and financial services",
}

_HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"]

CORE_NODES: Dict[str, Dict[str, Any]] = {
    "n8n-nodes-base.manualTrigger": {
        "category": "Core",
        "description": "Starts workflow manually from the workflow editor",
        "inputsCount": 0,
        "outputsCount": 1,
        "commonParameters": {},
        "usageNotes": "Best for testing workflows or workflows that should be started manually",
    },
    "n8n-nodes-base.webhook": {
        "category": "Core",
        "description": "Listens for HTTP requests to trigger the workflow",
        "inputsCount": 0,
        "outputsCount": 1,
        "commonParameters": {
            "httpMethod": {"type": "string", "default": "GET", "options": _HTTP_METHODS},
            "path": {
                "type": "string",
                "description": "The URL path that will trigger this webhook",
            },
            "authentication": {
                "type": "string",
                "default": "none",
                "options": ["none", "basicAuth", "headerAuth"],
            },
            "responseMode": {
                "type": "string",
                "default": "onReceived",
                "options": ["onReceived", "lastNode"],
            },
        },
        "usageNotes": "Creates an HTTP endpoint that can trigger your workflow from external systems",
    },
    "n8n-nodes-base.scheduleTrigger": {
        "category": "Core",
        "description": "Triggers workflow on a schedule (cron-like)",
        "inputsCount": 0,
        "outputsCount": 1,
        "commonParameters": {
            "rule": {
                "type": "object",
                "description": "Schedule configuration with intervals, timezone, etc.",
            },
            "triggerAtSecond": {"type": "number", "default": 0},
        },
        "usageNotes": "Perfect for automating workflows that need to run at specific times or intervals",
    },
    "n8n-nodes-base.code": {
        "category": "Core",
        "description": "Executes custom JavaScript or Python code",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "language": {
                "type": "string",
                "default": "javaScript",
                "options": ["javaScript", "python"],
            },
            "code": {"type": "string", "description": "The code to execute"},
        },
        "usageNotes": "Use for custom data processing, complex logic, or when no built-in node exists",
    },
    "n8n-nodes-base.httpRequest": {
        "category": "Core",
        "description": "Makes HTTP requests to any API",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "method": {"type": "string", "default": "GET", "options": _HTTP_METHODS},
            "url": {"type": "string", "description": "The URL to make the request to"},
            "authentication": {"type": "string", "default": "none"},
            "sendHeaders": {"type": "boolean", "default": False},
            "headerParameters": {"type": "object"},
            "sendQuery": {"type": "boolean", "default": False},
            "queryParameters": {"type": "object"},
            "sendBody": {"type": "boolean", "default": False},
            "bodyParameters": {"type": "object"},
        },
        "usageNotes": "Generic HTTP client for APIs that don't have dedicated n8n nodes",
    },
    "n8n-nodes-base.set": {
        "category": "Core",
        "description": "Modifies data by setting, removing, or keeping specific fields",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "keepOnlySet": {
                "type": "boolean",
                "default": False,
                "description": "Whether to keep only the set fields",
            },
            "values": {"type": "object", "description": "Fields to set with their values"},
        },
        "usageNotes": "Essential for data transformation and cleaning in workflows",
    },
    "n8n-nodes-base.if": {
        "category": "Core",
        "description": "Routes data based on conditions (if/else logic)",
        "inputsCount": 1,
        "outputsCount": 2,
        "commonParameters": {
            "conditions": {"type": "object", "description": "Array of conditions to evaluate"},
            "combineOperation": {"type": "string", "default": "all", "options": ["all", "any"]},
        },
        "usageNotes": 'Creates conditional workflows - items go to "true" or "false" output based on conditions',
    },
    "n8n-nodes-base.switch": {
        "category": "Core",
        "description": "Routes data to different outputs based on rules",
        "inputsCount": 1,
        "outputsCount": 4,
        "commonParameters": {
            "mode": {"type": "string", "default": "rules", "options": ["rules", "expression"]},
            "rules": {"type": "object", "description": "Array of routing rules"},
        },
        "usageNotes": "More flexible than IF node - can route to multiple different paths",
    },
    "n8n-nodes-base.merge": {
        "category": "Core",
        "description": "Combines data from multiple inputs",
        "inputsCount": 2,
        "outputsCount": 1,
        "commonParameters": {
            "mode": {
                "type": "string",
                "default": "append",
                "options": ["append", "merge", "chooseBranch", "multiplex"],
            },
            "joinMode": {"type": "string", "default": "keepEverything"},
        },
        "usageNotes": "Combines data from different workflow branches or data sources",
    },
    "n8n-nodes-base.splitInBatches": {
        "category": "Core",
        "description": "Processes data in batches to handle large datasets",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "batchSize": {
                "type": "number",
                "default": 10,
                "description": "Number of items to process in each batch",
            },
            "options": {"type": "object"},
        },
        "usageNotes": "Prevents memory issues when processing large amounts of data",
    },
    "n8n-nodes-base.wait": {
        "category": "Core",
        "description": "Pauses workflow execution for a specified time",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "unit": {
                "type": "string",
                "default": "seconds",
                "options": ["seconds", "minutes", "hours", "days"],
            },
            "amount": {"type": "number", "default": 1},
        },
        "usageNotes": "Useful for rate limiting, delays, or waiting for external processes",
    },
    "n8n-nodes-base.noOp": {
        "category": "Core",
        "description": "Does nothing - passes data through unchanged",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {},
        "usageNotes": "Useful for debugging, placeholders, or organizing workflow layout",
    },
    "n8n-nodes-base.stopAndError": {
        "category": "Core",
        "description": "Stops workflow execution and optionally throws an error",
        "inputsCount": 1,
        "outputsCount": 0,
        "commonParameters": {
            "message": {"type": "string", "description": "Error message to display"},
        },
        "usageNotes": "Use for error handling, validation, or stopping execution under certain conditions",
    },
    "n8n-nodes-base.gmail": {
        "category": "Communication",
        "description": "Interacts with Gmail - send, read, and manage emails",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["message", "draft", "thread", "label"]},
            "operation": {
                "type": "string",
                "options": ["send", "get", "getAll", "delete", "reply"],
            },
        },
        "usageNotes": "Requires Gmail OAuth2 credentials. Great for email automation",
    },
    "n8n-nodes-base.slack": {
        "category": "Communication",
        "description": "Sends messages and interacts with Slack",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["message", "channel", "user"]},
            "operation": {
                "type": "string",
                "options": ["post", "update", "delete", "get", "getAll"],
            },
        },
        "usageNotes": "Requires Slack app credentials. Perfect for team notifications",
    },
    "n8n-nodes-base.telegram": {
        "category": "Communication",
        "description": "Sends messages via Telegram bot",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["message", "file", "chat"]},
            "operation": {
                "type": "string",
                "options": ["sendMessage", "sendPhoto", "sendDocument"],
            },
            "chatId": {"type": "string", "description": "Chat ID to send message to"},
        },
        "usageNotes": "Requires Telegram bot token. Perfect for instant notifications",
    },
    "n8n-nodes-base.discord": {
        "category": "Communication",
        "description": "Sends messages to Discord channels",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["message", "member"]},
            "operation": {"type": "string", "options": ["send", "get", "getAll"]},
            "webhookUrl": {"type": "string", "description": "Discord webhook URL"},
        },
        "usageNotes": "Use Discord webhook for simple messaging or bot token for advanced features",
    },
    "n8n-nodes-base.googleSheets": {
        "category": "Productivity",
        "description": "Reads from and writes to Google Sheets",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["spreadsheet", "sheet"]},
            "operation": {
                "type": "string",
                "options": ["read", "append", "update", "delete", "create"],
            },
        },
        "usageNotes": "Requires Google credentials. Excellent for data storage and reporting",
    },
    "n8n-nodes-base.notion": {
        "category": "Productivity",
        "description": "Manages Notion databases and pages",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {"type": "string", "options": ["database", "page", "user"]},
            "operation": {
                "type": "string",
                "options": ["get", "getAll", "create", "update", "delete"],
            },
        },
        "usageNotes": "Requires Notion integration token. Great for content management",
    },
    "n8n-nodes-base.airtable": {
        "category": "Productivity",
        "description": "Manages Airtable bases and records",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "operation": {
                "type": "string",
                "options": ["list", "read", "create", "update", "delete"],
            },
            "application": {"type": "string", "description": "Airtable base ID"},
            "table": {"type": "string", "description": "Table name"},
        },
        "usageNotes": "Requires Airtable API key. Great for managing structured data",
    },
    "n8n-nodes-base.mysql": {
        "category": "Data & Storage",
        "description": "Executes queries against MySQL databases",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "operation": {
                "type": "string",
                "default": "executeQuery",
                "options": ["executeQuery", "insert", "update", "delete"],
            },
            "query": {"type": "string", "description": "SQL query to execute"},
        },
        "usageNotes": "Requires MySQL credentials. Use for database operations and data integration",
    },
    "n8n-nodes-base.postgres": {
        "category": "Data & Storage",
        "description": "Executes queries against PostgreSQL databases",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "operation": {
                "type": "string",
                "default": "executeQuery",
                "options": ["executeQuery", "insert", "update", "delete"],
            },
            "query": {"type": "string", "description": "SQL query to execute"},
        },
        "usageNotes": "Requires PostgreSQL credentials. Powerful for complex data operations",
    },
    "n8n-nodes-base.hubspot": {
        "category": "Sales",
        "description": "Manages HubSpot CRM data - contacts, companies, deals",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {
                "type": "string",
                "options": ["contact", "company", "deal", "ticket"],
            },
            "operation": {
                "type": "string",
                "options": ["create", "update", "get", "getAll", "delete"],
            },
        },
        "usageNotes": "Requires HubSpot API key. Essential for CRM automation",
    },
    "n8n-nodes-base.openai": {
        "category": "AI",
        "description": "Interacts with OpenAI APIs for AI-powered text and image generation",
        "inputsCount": 1,
        "outputsCount": 1,
        "commonParameters": {
            "resource": {
                "type": "string",
                "options": ["text", "image", "audio", "assistant", "file"],
            },
            "operation": {
                "type": "string",
                "options": ["complete", "message", "generate", "transcribe"],
            },
        },
        "usageNotes": "Requires OpenAI API key. Powerful for AI integration in workflows",
    },
}


def _main_connection(*targets: str) -> Dict[str, Any]:
    return {"main": [[{"node": target, "type": "main", "index": 0} for target in targets]]}


WORKFLOW_EXAMPLES: Dict[str, Dict[str, Any]] = {
    "simple-webhook": {
        "name": "Simple Webhook Handler",
        "description": "Basic webhook that receives data and processes it",
        "nodes": [
            {
                "name": "Webhook",
                "type": "n8n-nodes-base.webhook",
                "parameters": {
                    "httpMethod": "POST",
                    "path": "my-webhook",
                    "responseMode": "onReceived",
                },
                "position": [0, 0],
            },
            {
                "name": "Process Data",
                "type": "n8n-nodes-base.set",
                "parameters": {
                    "values": {
                        "processedAt": "={{new Date().toISOString()}}",
                        "status": "processed",
                    }
                },
                "position": [200, 0],
            },
        ],
        "connections": {"Webhook": _main_connection("Process Data")},
    },
    "scheduled-task": {
        "name": "Daily Report Generator",
        "description": "Runs every day to generate and send a report",
        "nodes": [
            {
                "name": "Schedule",
                "type": "n8n-nodes-base.scheduleTrigger",
                "parameters": {"rule": {"interval": [{"field": "hours", "value": 24}]}},
                "position": [0, 0],
            },
            {
                "name": "Fetch Data",
                "type": "n8n-nodes-base.httpRequest",
                "parameters": {"method": "GET", "url": "https://api.example.com/data"},
                "position": [200, 0],
            },
            {
                "name": "Send Report",
                "type": "n8n-nodes-base.gmail",
                "parameters": {
                    "operation": "send",
                    "toList": "team@company.com",
                    "subject": "Daily Report",
                    "message": "={{JSON.stringify($json, null, 2)}}",
                },
                "position": [400, 0],
            },
        ],
        "connections": {
            "Schedule": _main_connection("Fetch Data"),
            "Fetch Data": _main_connection("Send Report"),
        },
    },
    "data-processing": {
        "name": "Data Transformation Pipeline",
        "description": "Processes and transforms data with conditional logic",
        "nodes": [
            {
                "name": "Manual Trigger",
                "type": "n8n-nodes-base.manualTrigger",
                "parameters": {},
                "position": [0, 0],
            },
            {
                "name": "Transform Data",
                "type": "n8n-nodes-base.set",
                "parameters": {
                    "values": {
                        "id": "={{$json.id}}",
                        "name": "={{$json.firstName}} {{$json.lastName}}",
                        "email": "={{$json.email.toLowerCase()}}",
                    }
                },
                "position": [200, 0],
            },
            {
                "name": "Check Valid Email",
                "type": "n8n-nodes-base.if",
                "parameters": {
                    "conditions": {
                        "string": [
                            {
                                "value1": "={{$json.email}}",
                                "operation": "contains",
                                "value2": "@",
                            }
                        ]
                    }
                },
                "position": [400, 0],
            },
        ],
        "connections": {
            "Manual Trigger": _main_connection("Transform Data"),
            "Transform Data": _main_connection("Check Valid Email"),
        },
    },
    "notification": {
        "name": "Multi-Channel Notification",
        "description": "Sends notifications to multiple channels simultaneously",
        "nodes": [
            {
                "name": "Webhook Trigger",
                "type": "n8n-nodes-base.webhook",
                "parameters": {"httpMethod": "POST", "path": "alert"},
                "position": [0, 0],
            },
            {
                "name": "Slack Notification",
                "type": "n8n-nodes-base.slack",
                "parameters": {
                    "operation": "postMessage",
                    "channel": "#alerts",
                    "text": "Alert: {{$json.message}}",
                },
                "position": [200, -100],
            },
            {
                "name": "Email Notification",
                "type": "n8n-nodes-base.gmail",
                "parameters": {
                    "operation": "send",
                    "toList": "admin@company.com",
                    "subject": "System Alert",
                    "message": "{{$json.message}}",
                },
                "position": [200, 100],
            },
        ],
        "connections": {
            "Webhook Trigger": _main_connection("Slack Notification", "Email Notification"),
        },
    },
    "api-integration": {
        "name": "API Data Sync",
        "description": "Fetches data from one API and syncs it to another system",
        "nodes": [
            {
                "name": "Schedule Trigger",
                "type": "n8n-nodes-base.scheduleTrigger",
                "parameters": {"rule": {"interval": [{"field": "minutes", "value": 15}]}},
                "position": [0, 0],
            },
            {
                "name": "Fetch from API",
                "type": "n8n-nodes-base.httpRequest",
                "parameters": {
                    "method": "GET",
                    "url": "https://api.source.com/data",
                    "authentication": "headerAuth",
                },
                "position": [200, 0],
            },
            {
                "name": "Transform for Target",
                "type": "n8n-nodes-base.code",
                "parameters": {
                    "language": "javaScript",
                    "code": (
                        "const transformed = items.map(item => ({\n"
                        "  id: item.json.id,\n"
                        "  name: item.json.name,\n"
                        "  status: item.json.active ? 'active' : 'inactive',\n"
                        "  updatedAt: new Date().toISOString()\n"
                        "}));\n"
                        "return transformed;"
                    ),
                },
                "position": [400, 0],
            },
            {
                "name": "Send to Target API",
                "type": "n8n-nodes-base.httpRequest",
                "parameters": {
                    "method": "POST",
                    "url": "https://api.target.com/data",
                    "sendBody": True,
                    "bodyParameters": {"data": "={{$json}}"},
                },
                "position": [600, 0],
            },
        ],
        "connections": {
            "Schedule Trigger": _main_connection("Fetch from API"),
            "Fetch from API": _main_connection("Transform for Target"),
            "Transform for Target": _main_connection("Send to Target API"),
        },
    },
}


def list_node_types(
    category: Optional[str] = None, search: Optional[str] = None
) -> Dict[str, Any]:
    """List node types, optionally filtered by category and a search term."""
    nodes = list(CORE_NODES.items())

    if category:
        nodes = [(name, info) for name, info in nodes if info["category"] == category]

    if search:
        term = search.lower()
        nodes = [
            (name, info)
            for name, info in nodes
            if term in name.lower() or term in info["description"].lower()
        ]

    node_list: List[Dict[str, Any]] = [
        {
            "nodeType": name,
            "category": info["category"],
            "description": info["description"],
            "inputsCount": info["inputsCount"],
            "outputsCount": info["outputsCount"],
            "usageNotes": info["usageNotes"],
        }
        for name, info in nodes
    ]

    return {
        "totalNodes": len(node_list),
        "nodes": node_list,
        "availableCategories": list(NODE_CATEGORIES),
    }


def get_node_type(node_type: str) -> Optional[Dict[str, Any]]:
    """Details for one node type, with a skeleton node to start from."""
    info = CORE_NODES.get(node_type)
    if info is None:
        return None

    return {
        "nodeType": node_type,
        **info,
        "exampleUsage": {
            "basicStructure": {
                "name": node_type.split(".")[-1],
                "type": node_type,
                "parameters": info["commonParameters"],
                "position": [0, 0],
            }
        },
    }


def list_categories() -> Dict[str, Any]:
    return {
        "categories": [
            {
                "name": name,
                "description": description,
                "nodeCount": sum(
                    1 for info in CORE_NODES.values() if info["category"] == name
                ),
            }
            for name, description in NODE_CATEGORIES.items()
        ]
    }


def get_workflow_examples(use_case: Optional[str] = None) -> Dict[str, Any]:
    """One example by use case, or all of them."""
    if use_case and use_case in WORKFLOW_EXAMPLES:
        return WORKFLOW_EXAMPLES[use_case]

    return {
        "availableExamples": list(WORKFLOW_EXAMPLES),
        "examples": WORKFLOW_EXAMPLES,
    }
