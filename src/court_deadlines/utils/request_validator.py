"""
Request Validator Utility
Validates deadline calculation requests before they reach the engine
"""

import logging
from typing import Dict, Iterable, Optional

from ..core.exceptions import InvalidBaseDate
from ..core.deadline_engine import normalize_base_date
from ..core.rule_catalog import case_type_key

logger = logging.getLogger(__name__)

class RequestValidator:
    """
    Validates calculation request payloads
    Collects every problem instead of stopping at the first one
    """
    
    ALLOWED_FIELDS = {
        'case_type',
        'base_date',
        'client_reference',
        'add_to_calendar',
        'create_tasks'
    }
    
    def __init__(self, known_case_types: Optional[Iterable[str]] = None):
        """
        Initialize request validator
        
        Args:
            known_case_types: Case types accepted by the engine (not checked when None)
        """
        self.known_case_types = {case_type_key(c) for c in known_case_types} if known_case_types is not None else None
    
    def validate_request(self, request: Dict) -> Dict:
        """
        Validate a calculation request
        
        Args:
            request: Request payload
            
        Returns:
            Validation results
        """
        
        results = {
            "valid": True,
            "errors": [],
            "warnings": []
        }
        
        if not isinstance(request, dict):
            results["valid"] = False
            results["errors"].append("Request must be an object")
            return results
        
        # Required fields
        case_type = request.get('case_type')
        if not case_type:
            results["errors"].append("Missing required field: case_type")
        elif not isinstance(case_type, str):
            results["errors"].append("case_type must be a string")
        elif self.known_case_types is not None and case_type_key(case_type) not in self.known_case_types:
            results["errors"].append(f"Unknown case type: {case_type}")
        
        if not request.get('base_date'):
            results["errors"].append("Missing required field: base_date")
        else:
            try:
                normalize_base_date(request['base_date'])
            except InvalidBaseDate as e:
                results["errors"].append(str(e))
        
        # Optional fields
        client_reference = request.get('client_reference')
        if client_reference is not None and not isinstance(client_reference, str):
            results["errors"].append("client_reference must be a string")
        
        for flag in ('add_to_calendar', 'create_tasks'):
            if flag in request and not isinstance(request[flag], bool):
                results["errors"].append(f"{flag} must be true or false")
        
        if (request.get('add_to_calendar') or request.get('create_tasks')) and not client_reference:
            results["warnings"].append("Entries will be created without a client reference")
        
        unknown = sorted(set(request) - self.ALLOWED_FIELDS)
        if unknown:
            results["warnings"].append(f"Ignoring unknown fields: {', '.join(unknown)}")
        
        if results["errors"]:
            results["valid"] = False
            logger.warning(f"Rejected calculation request: {'; '.join(results['errors'])}")
        
        return results
