"""Resource types for version v1alpha1 of the operators.coreos.com API group."""