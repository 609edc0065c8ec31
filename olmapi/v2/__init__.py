"""Resource types for version v2 of the operators.coreos.com API group."""